# =============================================================================
# core/services/analytics_service.py - Chat Analytics
# =============================================================================
# Records each chat question in chat_events on the separate analytics
# Supabase project and summarizes them for the parents dashboard.
#
# Logging is best-effort: a missing analytics project or a failed insert
# never affects the chat response.
# =============================================================================

import logging
from collections import Counter
from typing import Any

from lib.calendar_utils import day_bounds
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "chat_events"
TOP_QUERIES = 10
RECENT_QUERY_SAMPLE = 500


def top_queries(queries: list[str], limit: int = TOP_QUERIES) -> list[dict[str, Any]]:
    """Most frequent queries after lowercasing and trimming."""
    counts = Counter(q.lower().strip() for q in queries if q)
    return [{"query": query, "count": count} for query, count in counts.most_common(limit)]


class AnalyticsService:
    """Service for chat usage analytics."""

    @staticmethod
    def log_chat_event(
        query: str,
        response_time_ms: int,
        user_agent: str | None = None,
        cached_knowledge: bool = False,
    ) -> None:
        client = SupabaseClient.get_analytics_client()
        if client is None:
            return

        try:
            client.table(TABLE).insert({
                "query": query,
                "response_time_ms": response_time_ms,
                "user_agent": user_agent or None,
                "cached_notion": cached_knowledge,
                "created_at": utc_now_iso(),
            }).execute()
        except Exception as e:
            logger.error(f"Failed to log chat event: {e}")

    @staticmethod
    def get_analytics_summary() -> dict[str, Any] | None:
        """
        Totals, average response time, today's count and top queries.

        Returns:
            None when analytics aren't configured or the queries fail
        """
        client = SupabaseClient.get_analytics_client()
        if client is None:
            return None

        try:
            stats = client.table(TABLE).select("response_time_ms").execute().data or []
            total = len(stats)
            average = round(sum(row.get("response_time_ms") or 0 for row in stats) / total) if total else 0

            today_start, _ = day_bounds()
            today = (
                client.table(TABLE)
                .select("*", count="exact", head=True)
                .gte("created_at", today_start.isoformat())
                .execute()
            )

            recent = (
                client.table(TABLE)
                .select("query")
                .order("created_at", desc=True)
                .limit(RECENT_QUERY_SAMPLE)
                .execute()
            ).data or []
        except Exception as e:
            logger.error(f"Failed to get analytics: {e}")
            return None

        return {
            "total_queries": total,
            "avg_response_time_ms": average,
            "queries_today": today.count or 0,
            "top_queries": top_queries([row.get("query") or "" for row in recent]),
        }
