# =============================================================================
# tests/test_doodles.py - Drawing Board Tests
# =============================================================================

from datetime import date

import pytest

from app.exceptions import InvalidInputError, NotFoundError
from core.models.doodle import DoodleCreate
from core.services.doodle_service import DoodleService, default_title

FAMILY_ID = "11111111-1111-1111-1111-111111111111"
NO_ROWS = RuntimeError("{'code': 'PGRST116', 'message': 'JSON object requested, multiple (or no) rows returned'}")


class TestDoodleService:

    def test_default_title(self):
        assert default_title(date(2024, 3, 9)) == "Doodle 03/09/2024"

    def test_create(self, fake_db):
        fake_db.results["doodle_drawings"] = [[{"id": "d1"}]]

        drawing = DoodleService.create_doodle(
            DoodleCreate(image_data="data:image/png;base64,AAA"),
            today=date(2024, 3, 9),
        )

        assert drawing == {"id": "d1"}
        row = fake_db.queries_for("doodle_drawings", "insert")[0].called("insert")[0][0][0]
        assert row == {
            "user_id": FAMILY_ID,
            "title": "Doodle 03/09/2024",
            "image_data": "data:image/png;base64,AAA",
            "thumbnail_data": "data:image/png;base64,AAA",
        }

    def test_create_requires_image(self, fake_db):
        with pytest.raises(InvalidInputError):
            DoodleService.create_doodle(DoodleCreate(title="Blank"))

    def test_get_missing(self, fake_db):
        fake_db.results["doodle_drawings"] = [NO_ROWS]
        with pytest.raises(NotFoundError):
            DoodleService.get_doodle("d404")

    def test_get_other_error_propagates(self, fake_db):
        fake_db.results["doodle_drawings"] = [RuntimeError("connection reset")]
        with pytest.raises(RuntimeError):
            DoodleService.get_doodle("d1")

    def test_delete_scoped_to_family(self, fake_db):
        DoodleService.delete_doodle("d1")
        assert fake_db.queries_for("doodle_drawings", "delete")[0].filters() == {
            "id": "d1",
            "user_id": FAMILY_ID,
        }


class TestDoodleRoutes:

    def test_list(self, client, fake_db):
        fake_db.results["doodle_drawings"] = [[{"id": "d1", "title": "Rocket", "created_at": "2024-03-09"}]]
        body = client.get("/api/v1/doodles").json()
        assert body["drawings"][0]["title"] == "Rocket"
        assert body["drawings"][0]["thumbnail_data"] is None

    def test_create_without_image_is_400(self, client, fake_db):
        response = client.post("/api/v1/doodles", json={"title": "Blank"})
        assert response.status_code == 400

    def test_create(self, client, fake_db):
        fake_db.results["doodle_drawings"] = [[{"id": "d1"}]]
        response = client.post("/api/v1/doodles", json={"image_data": "data:image/png;base64,AAA"})
        assert response.status_code == 201
        assert response.json() == {"drawing": {"id": "d1"}}

    def test_get_404(self, client, fake_db):
        fake_db.results["doodle_drawings"] = [NO_ROWS]
        response = client.get("/api/v1/doodles/d404")
        assert response.status_code == 404
        assert response.json()["code"] == "DRAWING_NOT_FOUND"

    def test_delete_by_query_requires_id(self, client, fake_db):
        assert client.delete("/api/v1/doodles").status_code == 400

    def test_delete_by_query(self, client, fake_db):
        assert client.delete("/api/v1/doodles", params={"id": "d1"}).json() == {"success": True}
