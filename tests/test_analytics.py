# =============================================================================
# tests/test_analytics.py - Chat Analytics Tests
# =============================================================================

from unittest.mock import patch

from core.services.analytics_service import AnalyticsService, top_queries
from lib.supabase_client import SupabaseClient


class TestTopQueries:

    def test_groups_case_and_whitespace(self):
        result = top_queries(["Weather?", " weather? ", "dentist", ""])
        assert result == [{"query": "weather?", "count": 2}, {"query": "dentist", "count": 1}]

    def test_limit(self):
        assert len(top_queries([f"q{i}" for i in range(20)], limit=3)) == 3


class TestAnalyticsService:

    def test_log_without_project_is_noop(self):
        with patch.object(SupabaseClient, "get_analytics_client", return_value=None):
            AnalyticsService.log_chat_event("q", 100)

    def test_log_inserts(self, fake_analytics_db):
        AnalyticsService.log_chat_event("When is soccer?", 850, "", True)

        row = fake_analytics_db.queries_for("chat_events", "insert")[0].called("insert")[0][0][0]
        assert row["query"] == "When is soccer?"
        assert row["response_time_ms"] == 850
        assert row["user_agent"] is None
        assert row["cached_notion"] is True

    def test_log_failure_is_swallowed(self, fake_analytics_db):
        fake_analytics_db.results["chat_events"] = [RuntimeError("insert failed")]
        AnalyticsService.log_chat_event("q", 100)

    def test_summary(self, fake_analytics_db):
        fake_analytics_db.results["chat_events"] = [
            [{"response_time_ms": 100}, {"response_time_ms": 301}],
            [{}],
            [{"query": "Weather"}, {"query": "weather"}, {"query": "Dentist"}],
        ]

        summary = AnalyticsService.get_analytics_summary()

        assert summary == {
            "total_queries": 2,
            "avg_response_time_ms": 200,
            "queries_today": 1,
            "top_queries": [{"query": "weather", "count": 2}, {"query": "dentist", "count": 1}],
        }

    def test_summary_empty(self, fake_analytics_db):
        summary = AnalyticsService.get_analytics_summary()
        assert summary["total_queries"] == 0
        assert summary["avg_response_time_ms"] == 0

    def test_summary_failure(self, fake_analytics_db):
        fake_analytics_db.results["chat_events"] = [RuntimeError("relation does not exist")]
        assert AnalyticsService.get_analytics_summary() is None


class TestAnalyticsRoute:

    def test_not_configured_is_503(self, client, adult_headers):
        with patch.object(SupabaseClient, "get_analytics_client", return_value=None):
            response = client.get("/api/v1/admin/analytics", headers=adult_headers)
        assert response.status_code == 503
        assert response.json()["code"] == "NOT_CONFIGURED"

    def test_summary(self, client, adult_headers, fake_analytics_db):
        body = client.get("/api/v1/admin/analytics", headers=adult_headers).json()
        assert body["total_queries"] == 0
