# =============================================================================
# tests/test_family_service.py - Family Administration Tests
# =============================================================================

import pytest

from app.auth.security import hash_pin
from app.exceptions import InvalidInputError, NotFoundError
from core.models.family import (
    ChildCreate,
    ChildUpdate,
    FamilyMemberCreate,
    FamilyMemberUpdate,
    FamilyRole,
    UserCreate,
)
from core.services.family_service import FamilyService

FAMILY_ID = "11111111-1111-1111-1111-111111111111"


class TestFamilyMembers:

    def test_create_hashes_pin(self, fake_db):
        fake_db.results["family_members"] = [[{"id": "m1", "name": "Riley"}]]

        member = FamilyService.create_member(
            FamilyMemberCreate(name="Riley", role=FamilyRole.KID, pin="4321", has_checklist=True)
        )

        assert member["id"] == "m1"
        row = fake_db.queries_for("family_members", "insert")[0].called("insert")[0][0][0]
        assert row["pin_hash"] == hash_pin("4321")
        assert row["role"] == "kid"
        assert row["has_checklist"] is True
        assert "pin" not in row

    def test_pet_cannot_have_pin(self, fake_db):
        with pytest.raises(InvalidInputError) as exc_info:
            FamilyService.create_member(FamilyMemberCreate(name="Biscuit", role="pet", pin="1111"))
        assert exc_info.value.details["field"] == "pin"
        assert fake_db.queries_for("family_members", "insert") == []

    def test_pet_without_pin(self, fake_db):
        fake_db.results["family_members"] = [[{"id": "p1"}]]
        FamilyService.create_member(FamilyMemberCreate(name="Biscuit", role="pet", avatar_url=""))
        row = fake_db.queries_for("family_members", "insert")[0].called("insert")[0][0][0]
        assert row["pin_hash"] is None
        assert row["avatar_url"] is None

    @pytest.mark.parametrize("pin", ["123", "12345", "abcd"])
    def test_bad_pin_format(self, fake_db, pin):
        with pytest.raises(InvalidInputError):
            FamilyService.create_member(FamilyMemberCreate(name="Max", role="adult", pin=pin))

    def test_update_clears_pin(self, fake_db):
        fake_db.results["family_members"] = [[{"id": "m1"}]]
        FamilyService.update_member("m1", FamilyMemberUpdate(pin=""))

        update = fake_db.queries_for("family_members", "update")[0]
        assert update.called("update")[0][0][0] == {"pin_hash": None}
        assert update.filters() == {"id": "m1"}

    def test_update_sets_pin_and_role(self, fake_db):
        fake_db.results["family_members"] = [[{"id": "m1"}]]
        FamilyService.update_member("m1", FamilyMemberUpdate(pin="9876", role="adult"))

        updates = fake_db.queries_for("family_members", "update")[0].called("update")[0][0][0]
        assert updates == {"pin_hash": hash_pin("9876"), "role": "adult"}

    def test_stored_pet_cannot_get_pin(self, fake_db):
        fake_db.results["family_members"] = [[{"role": "pet"}]]
        with pytest.raises(InvalidInputError):
            FamilyService.update_member("p1", FamilyMemberUpdate(pin="1234"))
        assert fake_db.queries_for("family_members", "update") == []

    def test_becoming_a_pet_clears_pin(self, fake_db):
        fake_db.results["family_members"] = [[{"id": "p1"}]]
        FamilyService.update_member("p1", FamilyMemberUpdate(role="pet"))

        updates = fake_db.queries_for("family_members", "update")[0].called("update")[0][0][0]
        assert updates == {"role": "pet", "pin_hash": None}

    def test_update_nothing(self, fake_db):
        with pytest.raises(InvalidInputError):
            FamilyService.update_member("m1", FamilyMemberUpdate())

    def test_update_missing_member(self, fake_db):
        fake_db.results["family_members"] = [[]]
        with pytest.raises(NotFoundError):
            FamilyService.update_member("gone", FamilyMemberUpdate(name="Ghost"))

    def test_list_attaches_checklist_items(self, fake_db):
        fake_db.results["family_members"] = [[
            {"id": "m1", "name": "Max", "has_checklist": False},
            {"id": "m2", "name": "Riley", "has_checklist": True},
        ]]
        fake_db.results["checklist_items"] = [[{"id": "i1", "title": "Vitamins"}]]

        members = FamilyService.list_members()

        assert members[0]["checklist_items"] == []
        assert members[1]["checklist_items"] == [{"id": "i1", "title": "Vitamins"}]
        assert len(fake_db.queries_for("checklist_items")) == 1

    def test_delete_cascades(self, fake_db):
        fake_db.results["checklist_items"] = [[{"id": "i1"}, {"id": "i2"}], []]

        FamilyService.delete_member("m1")

        completion_deletes = fake_db.queries_for("checklist_completions", "delete")
        assert completion_deletes[0].called("in_") == [(("item_id", ["i1", "i2"]), {})]
        assert completion_deletes[1].filters() == {"member_id": "m1"}
        assert fake_db.queries_for("checklist_items", "delete")[0].filters() == {"member_id": "m1"}
        assert fake_db.queries_for("family_members", "delete")[0].filters() == {"id": "m1"}

    def test_delete_survives_cleanup_failure(self, fake_db):
        fake_db.results["checklist_completions"] = [RuntimeError("no such column")]

        FamilyService.delete_member("m1")

        assert len(fake_db.queries_for("family_members", "delete")) == 1


class TestUsers:

    def test_create(self, fake_db):
        fake_db.results["users"] = [[{"id": "u1", "name": "Max"}]]
        FamilyService.create_user(UserCreate(name="Max", role="parent", pin="1234"))

        row = fake_db.queries_for("users", "insert")[0].called("insert")[0][0][0]
        assert row == {"name": "Max", "role": "parent", "pin_hash": hash_pin("1234"), "integrations": {}}

    def test_create_bad_pin(self, fake_db):
        with pytest.raises(InvalidInputError):
            FamilyService.create_user(UserCreate(name="Max", role="parent", pin="12a4"))

    def test_update_pin(self, fake_db):
        FamilyService.update_user_pin("u1", "0000")
        update = fake_db.queries_for("users", "update")[0]
        assert update.called("update")[0][0][0] == {"pin_hash": hash_pin("0000")}


class TestChildren:

    def test_create_scoped_to_family(self, fake_db):
        fake_db.results["children"] = [[{"id": "c1"}]]
        FamilyService.create_child(ChildCreate(name="Riley", age=9))

        row = fake_db.queries_for("children", "insert")[0].called("insert")[0][0][0]
        assert row == {"user_id": FAMILY_ID, "name": "Riley", "age": 9, "grade": None}

    def test_update_other_family_child(self, fake_db):
        fake_db.results["children"] = [[]]
        with pytest.raises(NotFoundError):
            FamilyService.update_child("c9", ChildUpdate(grade="4th"))
        assert fake_db.queries_for("children", "update")[0].filters() == {"id": "c9", "user_id": FAMILY_ID}


class TestAdminRoutes:

    def test_requires_token(self, client, fake_db):
        assert client.get("/api/v1/admin/family").status_code == 401

    def test_kid_is_forbidden(self, client, fake_db, kid_headers):
        assert client.get("/api/v1/admin/family", headers=kid_headers).status_code == 403

    def test_create_member(self, client, fake_db, adult_headers):
        fake_db.results["family_members"] = [[{"id": "m1", "name": "Riley", "role": "kid"}]]
        response = client.post(
            "/api/v1/admin/family",
            json={"name": "Riley", "role": "kid", "pin": "4321"},
            headers=adult_headers,
        )
        assert response.status_code == 201
        assert response.json()["member"]["id"] == "m1"

    def test_pet_pin_is_400(self, client, fake_db, adult_headers):
        response = client.post(
            "/api/v1/admin/family",
            json={"name": "Biscuit", "role": "pet", "pin": "4321"},
            headers=adult_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INPUT"

    def test_update_to_pet_with_pin_is_400(self, client, fake_db, adult_headers):
        response = client.put(
            "/api/v1/admin/family/m1",
            json={"role": "pet", "pin": "1234"},
            headers=adult_headers,
        )
        assert response.status_code == 400
        assert fake_db.queries_for("family_members", "update") == []

    def test_unknown_role_is_400(self, client, fake_db, adult_headers):
        response = client.post(
            "/api/v1/admin/family",
            json={"name": "Robo", "role": "robot"},
            headers=adult_headers,
        )
        assert response.status_code == 400

    def test_delete_user(self, client, fake_db, adult_headers):
        response = client.delete("/api/v1/admin/users/u1", headers=adult_headers)
        assert response.json() == {"success": True}
        assert fake_db.queries_for("users", "delete")[0].filters() == {"id": "u1"}

    def test_children(self, client, fake_db, adult_headers):
        fake_db.results["children"] = [[{"id": "c1", "name": "Riley"}]]
        body = client.get("/api/v1/admin/children", headers=adult_headers).json()
        assert body["children"][0]["checklist_items"] == []
