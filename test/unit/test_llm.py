"""
Unit tests for backend/mcqgen/services/llm_service/llm.py
Tests: token budget, API key resolution, client construction, message
shape, error wrapping, content flattening. The Gemini client is mocked.
"""

import sys
import os
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock
import pytest

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

from langchain_core.messages import HumanMessage, SystemMessage

from mcqgen.core.config import settings
from mcqgen.core.exceptions import BackendUnavailableError, ConfigurationError
from mcqgen.services.llm_service.llm import (
    _response_text,
    ainvoke_model,
    compute_token_budget,
    invoke_model,
    resolve_api_key,
)


class TestTokenBudget:

    @pytest.mark.parametrize("count,expected", [
        (0, 8000),
        (1, 8300),
        (10, 11000),
        (50, 23000),
        (80, 32000),
        (100, 32000),
        (500, 32000),
    ])
    def test_budget(self, count, expected):
        assert compute_token_budget(count) == expected

    def test_budget_follows_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "LLM_TOKEN_BASE", 1000)
        monkeypatch.setattr(settings, "LLM_TOKENS_PER_QUESTION", 100)
        monkeypatch.setattr(settings, "LLM_TOKEN_CAP", 1500)
        assert compute_token_budget(3) == 1300
        assert compute_token_budget(10) == 1500


class TestResolveApiKey:

    def test_explicit_key_wins(self):
        assert resolve_api_key("user-key") == "user-key"

    def test_falls_back_to_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_API_KEY", "env-key")
        assert resolve_api_key(None) == "env-key"
        assert resolve_api_key("   ") == "env-key"

    def test_missing_key_raises(self, no_default_key):
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_api_key(None)
        assert exc_info.value.message == "Gemini API key is required. Please add it in Settings."

    def test_blank_key_raises(self, no_default_key):
        with pytest.raises(ConfigurationError):
            resolve_api_key("")


class TestInvokeModel:

    def test_returns_text(self, mock_chat_model):
        _, instance = mock_chat_model
        instance.invoke.return_value = SimpleNamespace(content='  [{"questionText": "Q"}]\n')
        assert invoke_model("sys", "user", 5, api_key="k") == '[{"questionText": "Q"}]'

    def test_client_kwargs(self, mock_chat_model):
        cls, _ = mock_chat_model
        invoke_model("sys", "user", 10, api_key="user-key")

        kwargs = cls.call_args.kwargs
        assert kwargs["model"] == settings.GOOGLE_MODEL
        assert kwargs["google_api_key"] == "user-key"
        assert kwargs["max_tokens"] == 11000
        assert kwargs["temperature"] == settings.LLM_TEMPERATURE_STRUCTURED
        assert kwargs["top_p"] == settings.LLM_TOP_P_STRUCTURED
        assert kwargs["top_k"] == settings.LLM_TOP_K
        assert kwargs["timeout"] == settings.LLM_TIMEOUT
        assert kwargs["max_retries"] == 0

    def test_messages_system_then_user(self, mock_chat_model):
        _, instance = mock_chat_model
        invoke_model("the system", "the user", 3, api_key="k")

        messages = instance.invoke.call_args.args[0]
        assert len(messages) == 2
        assert isinstance(messages[0], SystemMessage)
        assert isinstance(messages[1], HumanMessage)
        assert messages[0].content == "the system"
        assert messages[1].content == "the user"

    def test_called_exactly_once_on_failure(self, mock_chat_model):
        _, instance = mock_chat_model
        instance.invoke.side_effect = ConnectionError("reset by peer")

        with pytest.raises(BackendUnavailableError) as exc_info:
            invoke_model("sys", "user", 3, api_key="k")

        assert instance.invoke.call_count == 1
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert "reset by peer" not in exc_info.value.message

    def test_missing_key_skips_network(self, mock_chat_model, no_default_key):
        cls, instance = mock_chat_model
        with pytest.raises(ConfigurationError):
            invoke_model("sys", "user", 3)
        cls.assert_not_called()
        instance.invoke.assert_not_called()

    def test_fresh_client_per_call(self, mock_chat_model):
        cls, _ = mock_chat_model
        invoke_model("sys", "user", 1, api_key="a")
        invoke_model("sys", "user", 1, api_key="b")
        keys = [c.kwargs["google_api_key"] for c in cls.call_args_list]
        assert keys == ["a", "b"]


class TestResponseText:

    def test_string_content(self):
        assert _response_text(SimpleNamespace(content=" [1] ")) == "[1]"

    def test_list_of_parts(self):
        response = SimpleNamespace(content=[
            {"type": "text", "text": '[{"questionText": '},
            '"Q1"}]',
        ])
        assert _response_text(response) == '[{"questionText": "Q1"}]'

    def test_non_text_parts_skipped(self):
        response = SimpleNamespace(content=[
            {"type": "thinking", "thinking": "hmm"},
            {"type": "text", "text": "[]"},
        ])
        assert _response_text(response) == "[]"


class TestAsyncInvokeModel:

    @pytest.mark.asyncio
    async def test_returns_text(self, mock_chat_model):
        _, instance = mock_chat_model
        instance.ainvoke.return_value = SimpleNamespace(content="[]")
        assert await ainvoke_model("sys", "user", 2, api_key="k") == "[]"
        instance.ainvoke.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self, mock_chat_model, monkeypatch):
        _, instance = mock_chat_model
        monkeypatch.setattr(settings, "LLM_TIMEOUT", 1)

        async def _slow(_messages):
            await asyncio.sleep(5)

        instance.ainvoke = AsyncMock(side_effect=_slow)

        with pytest.raises(BackendUnavailableError) as exc_info:
            await ainvoke_model("sys", "user", 2, api_key="k")
        assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)

    @pytest.mark.asyncio
    async def test_provider_error_wrapped(self, mock_chat_model):
        _, instance = mock_chat_model
        instance.ainvoke = AsyncMock(side_effect=RuntimeError("429 quota exceeded"))

        with pytest.raises(BackendUnavailableError):
            await ainvoke_model("sys", "user", 2, api_key="k")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
