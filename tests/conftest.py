# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - A chainable in-memory stand-in for the Supabase query builder
# - Session tokens for an adult and a kid
# - Module caches (weather, content, knowledge base) cleared between tests
# =============================================================================

import os
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock, patch

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-session-tokens")
os.environ.setdefault("SHORTCUTS_SECRET_KEY", "test-shortcut-key")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("FAMILY_USER_ID", "11111111-1111-1111-1111-111111111111")
os.environ.setdefault("TIMEZONE", "America/New_York")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient


# =============================================================================
# Fake Supabase
# =============================================================================

class FakeQuery:
    """
    Records every builder call and returns itself, so any
    table().select().eq()...execute() chain works.

    execute() returns the next queued result for the table.
    """

    def __init__(self, table_name: str, db: "FakeSupabase"):
        self.table_name = table_name
        self.calls: list[tuple[str, tuple, dict]] = []
        self._db = db

    def __getattr__(self, name: str):
        if name.startswith("__"):
            raise AttributeError(name)

        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        data = self._db.next_result(self.table_name)
        return SimpleNamespace(data=data, count=len(data) if isinstance(data, list) else None)

    # Helpers for assertions

    def called(self, name: str) -> list[tuple[tuple, dict]]:
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]

    @property
    def operation(self) -> str | None:
        for call, _, _ in self.calls:
            if call in ("select", "insert", "update", "upsert", "delete"):
                return call
        return None

    def filters(self) -> dict[str, Any]:
        """eq() filters as {column: value}."""
        return {args[0]: args[1] for args, _ in self.called("eq")}


class FakeSupabase:
    """
    In-memory Supabase client.

    Args:
        results: {table: [result, result, ...]}; each execute() on the table
            takes the next result, the last one repeats. A result that is
            an Exception is raised instead.
    """

    def __init__(self, results: dict[str, list[Any]] | None = None):
        self.results = {name: list(queue) for name, queue in (results or {}).items()}
        self.queries: list[FakeQuery] = []
        self.storage = MagicMock()

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(name, self)
        self.queries.append(query)
        return query

    def next_result(self, name: str) -> Any:
        queue = self.results.get(name)
        if not queue:
            return []
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def queries_for(self, name: str, operation: str | None = None) -> list[FakeQuery]:
        return [
            q for q in self.queries
            if q.table_name == name and (operation is None or q.operation == operation)
        ]


@pytest.fixture
def fake_db():
    """
    Patch SupabaseClient.get_client to return a FakeSupabase.

    Use fake_db.results[...] to queue rows before the code under test runs.
    """
    db = FakeSupabase()
    with patch.object(SupabaseClient, "get_client", return_value=db):
        yield db


@pytest.fixture
def fake_analytics_db():
    db = FakeSupabase()
    with patch.object(SupabaseClient, "get_analytics_client", return_value=db):
        yield db


# =============================================================================
# Auth Fixtures
# =============================================================================

@pytest.fixture
def adult_user() -> dict[str, str]:
    return {"id": "22222222-2222-2222-2222-222222222222", "name": "Max", "role": "parent"}


@pytest.fixture
def kid_user() -> dict[str, str]:
    return {"id": "33333333-3333-3333-3333-333333333333", "name": "Riley", "role": "kid"}


@pytest.fixture
def adult_headers(adult_user) -> dict[str, str]:
    from app.auth.security import create_access_token
    return {"Authorization": f"Bearer {create_access_token(adult_user)}"}


@pytest.fixture
def kid_headers(kid_user) -> dict[str, str]:
    from app.auth.security import create_access_token
    return {"Authorization": f"Bearer {create_access_token(kid_user)}"}


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def client():
    """FastAPI TestClient (lifespan not run)."""
    from fastapi.testclient import TestClient
    from app.main import app
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_module_caches():
    """Module-level caches must not leak between tests."""
    from core.services.content_service import ContentService
    from core.services.knowledge_base import KnowledgeBaseService
    from core.services.weather_service import WeatherService

    WeatherService.clear_cache()
    ContentService.clear_cache()
    KnowledgeBaseService.invalidate_cache()
    yield
    WeatherService.clear_cache()
    ContentService.clear_cache()
    KnowledgeBaseService.invalidate_cache()
