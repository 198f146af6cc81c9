# =============================================================================
# tests/test_clients.py - Supabase & OpenAI Client Tests
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from app.config import settings
from lib import llm
from lib.llm import LLMError, complete_json, complete_text, create_completion
from lib.supabase_client import SupabaseClient, SupabaseClientError

NO_ROWS = RuntimeError("PGRST116: no rows returned")


@pytest.fixture
def fresh_clients():
    SupabaseClient.reset()
    llm.reset_client()
    yield
    SupabaseClient.reset()
    llm.reset_client()


def completion(content=None, tool_calls=None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


# =============================================================================
# Supabase
# =============================================================================

class TestSupabaseClient:

    def test_singleton(self, fresh_clients):
        with patch("lib.supabase_client.create_client", return_value=MagicMock()) as create:
            first = SupabaseClient.get_client()
            second = SupabaseClient.get_client()
        assert first is second
        create.assert_called_once_with(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)

    def test_init_failure(self, fresh_clients):
        with patch("lib.supabase_client.create_client", side_effect=ValueError("Invalid URL")):
            with pytest.raises(SupabaseClientError) as exc_info:
                SupabaseClient.get_client()
        assert exc_info.value.code == "CLIENT_INIT_FAILED"

    def test_analytics_disabled(self, fresh_clients, monkeypatch):
        monkeypatch.setattr(settings, "SUPABASE_ANALYTICS_URL", None)
        assert SupabaseClient.get_analytics_client() is None

    def test_analytics_init_failure_is_disabled(self, fresh_clients, monkeypatch):
        monkeypatch.setattr(settings, "SUPABASE_ANALYTICS_URL", "https://analytics.supabase.co")
        monkeypatch.setattr(settings, "SUPABASE_ANALYTICS_KEY", "key")
        with patch("lib.supabase_client.create_client", side_effect=ValueError("bad key")):
            assert SupabaseClient.get_analytics_client() is None

    def test_fetch_user_missing(self, fake_db):
        fake_db.results["users"] = [NO_ROWS]
        assert SupabaseClient.fetch_user("22222222-2222-2222-2222-222222222222") is None

    def test_fetch_user_error(self, fake_db):
        fake_db.results["users"] = [RuntimeError("timeout")]
        with pytest.raises(SupabaseClientError):
            SupabaseClient.fetch_user("22222222-2222-2222-2222-222222222222")

    def test_fetch_user_malformed_id_is_unknown(self, fake_db):
        fake_db.results["users"] = [RuntimeError("22P02 invalid input syntax for type uuid")]
        assert SupabaseClient.fetch_user("abc") is None
        assert fake_db.queries_for("users") == []

    def test_fetch_user_by_name_is_case_insensitive(self, fake_db):
        fake_db.results["users"] = [[{"id": "u1", "name": "Alex", "role": "parent"}]]
        assert SupabaseClient.fetch_user_by_name("ALEX")["id"] == "u1"
        assert fake_db.queries_for("users")[0].called("ilike") == [(("name", "ALEX"), {})]

    def test_fetch_user_by_pin_hash_none(self, fake_db):
        assert SupabaseClient.fetch_user_by_pin_hash("abc") is None


# =============================================================================
# OpenAI
# =============================================================================

class TestLLM:

    def test_not_configured(self, fresh_clients, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
        with pytest.raises(LLMError) as exc_info:
            complete_text("system", "hi")
        assert exc_info.value.code == "LLM_NOT_CONFIGURED"

    def test_completion_arguments(self, fresh_clients):
        client = MagicMock()
        client.chat.completions.create.return_value = completion("Hello")

        with patch("lib.llm.OpenAI", return_value=client):
            message = create_completion([{"role": "user", "content": "hi"}], max_tokens=50, tools=[{"t": 1}])

        assert message.content == "Hello"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == settings.OPENAI_MODEL
        assert kwargs["max_tokens"] == 50
        assert kwargs["tools"] == [{"t": 1}]
        assert "response_format" not in kwargs

    def test_api_error(self, fresh_clients):
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("rate limited")
        with patch("lib.llm.OpenAI", return_value=client):
            with pytest.raises(LLMError) as exc_info:
                complete_text("system", "hi")
        assert exc_info.value.code == "OPENAI_ERROR"

    def test_complete_text_strips(self, fresh_clients):
        client = MagicMock()
        client.chat.completions.create.return_value = completion("  Hi there \n")
        with patch("lib.llm.OpenAI", return_value=client):
            assert complete_text("system", "hi") == "Hi there"

    def test_complete_json(self, fresh_clients):
        client = MagicMock()
        client.chat.completions.create.return_value = completion('{"setup": "a", "punchline": "b"}')
        with patch("lib.llm.OpenAI", return_value=client):
            assert complete_json("system", "joke") == {"setup": "a", "punchline": "b"}
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", None])
    def test_complete_json_invalid(self, fresh_clients, content):
        client = MagicMock()
        client.chat.completions.create.return_value = completion(content)
        with patch("lib.llm.OpenAI", return_value=client):
            with pytest.raises(LLMError) as exc_info:
                complete_json("system", "joke")
        assert exc_info.value.code == "LLM_INVALID_JSON"
