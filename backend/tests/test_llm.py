"""Tests for the text-model gateway (Anthropic and Gemini backends)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest
from google.genai import errors as genai_errors

from advisor.config import Settings
from advisor.errors import UpstreamError
from advisor.models.contracts import ChatMessage
from advisor.utils.llm import AnthropicTextModel, GeminiTextModel, build_text_model

_ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"


def _anthropic_client(response=None, error=None) -> MagicMock:
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=response, side_effect=error)
    return client


def _anthropic_response(*texts: str):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=t) for t in texts],
        usage=SimpleNamespace(input_tokens=12, output_tokens=34),
    )


class TestAnthropicTextModel:
    async def test_complete_joins_text_blocks(self):
        client = _anthropic_client(_anthropic_response("Hello ", "world"))
        model = AnthropicTextModel(client, "claude-test", max_tokens=256)
        assert await model.complete("Hi", system="Be brief") == "Hello world"
        kwargs = client.messages.create.await_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 256
        assert kwargs["system"] == "Be brief"
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    async def test_no_system_prompt_is_omitted(self):
        client = _anthropic_client(_anthropic_response("ok"))
        await AnthropicTextModel(client, "claude-test").complete("Hi")
        assert "system" not in client.messages.create.await_args.kwargs

    async def test_chat_passes_history(self):
        client = _anthropic_client(_anthropic_response("ok"))
        history = [
            ChatMessage(role="user", content="Need a kettle"),
            ChatMessage(role="assistant", content="Electric?"),
            ChatMessage(role="user", content="Yes"),
        ]
        await AnthropicTextModel(client, "claude-test").chat(history, system="advisor")
        messages = client.messages.create.await_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "user"]

    async def test_status_error_becomes_upstream_error(self):
        response = httpx.Response(529, request=httpx.Request("POST", _ANTHROPIC_URL))
        error = anthropic.APIStatusError("Overloaded", response=response, body=None)
        model = AnthropicTextModel(_anthropic_client(error=error), "claude-test")
        with pytest.raises(UpstreamError) as exc_info:
            await model.complete("Hi")
        assert exc_info.value.status_code == 529
        assert exc_info.value.source == "model"

    async def test_connection_error_becomes_upstream_error(self):
        error = anthropic.APIConnectionError(request=httpx.Request("POST", _ANTHROPIC_URL))
        model = AnthropicTextModel(_anthropic_client(error=error), "claude-test")
        with pytest.raises(UpstreamError) as exc_info:
            await model.complete("Hi")
        assert exc_info.value.status_code is None

    async def test_other_api_error_becomes_upstream_error(self):
        error = anthropic.APIResponseValidationError(
            httpx.Response(200, request=httpx.Request("POST", _ANTHROPIC_URL)), body=None
        )
        model = AnthropicTextModel(_anthropic_client(error=error), "claude-test")
        with pytest.raises(UpstreamError) as exc_info:
            await model.complete("Hi")
        assert exc_info.value.status_code is None
        assert exc_info.value.source == "model"


class TestGeminiTextModel:
    def _client(self, text="ok", error=None) -> MagicMock:
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text=text), side_effect=error
        )
        return client

    async def test_complete(self):
        client = self._client("Sure")
        model = GeminiTextModel(client, "gemini-test", max_tokens=128)
        assert await model.complete("Hi", system="Be brief") == "Sure"
        kwargs = client.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "Hi"
        assert kwargs["config"].system_instruction == "Be brief"
        assert kwargs["config"].max_output_tokens == 128

    async def test_chat_maps_assistant_to_model_role(self):
        client = self._client()
        history = [
            ChatMessage(role="user", content="Need a kettle"),
            ChatMessage(role="assistant", content="Electric?"),
            ChatMessage(role="user", content="Yes"),
        ]
        await GeminiTextModel(client, "gemini-test").chat(history, system="advisor")
        contents = client.aio.models.generate_content.await_args.kwargs["contents"]
        assert [c.role for c in contents] == ["user", "model", "user"]
        assert contents[1].parts[0].text == "Electric?"

    async def test_empty_text_is_empty_string(self):
        model = GeminiTextModel(self._client(text=None), "gemini-test")
        assert await model.complete("Hi") == ""

    async def test_api_error_becomes_upstream_error(self):
        error = genai_errors.ServerError(
            503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}}
        )
        model = GeminiTextModel(self._client(error=error), "gemini-test")
        with pytest.raises(UpstreamError) as exc_info:
            await model.complete("Hi")
        assert exc_info.value.status_code == 503
        assert exc_info.value.source == "model"

    async def test_transport_error_becomes_upstream_error(self):
        error = httpx.ConnectError("connection refused")
        model = GeminiTextModel(self._client(error=error), "gemini-test")
        with pytest.raises(UpstreamError) as exc_info:
            await model.complete("Hi")
        assert exc_info.value.status_code is None
        assert exc_info.value.status_text == "ConnectError"


class TestBuildTextModel:
    def test_none_without_key(self):
        assert build_text_model(Settings(llm_provider="anthropic", anthropic_api_key="")) is None

    def test_anthropic(self):
        model = build_text_model(Settings(llm_provider="anthropic", anthropic_api_key="sk-test"))
        assert isinstance(model, AnthropicTextModel)

    def test_gemini(self):
        model = build_text_model(Settings(llm_provider="gemini", google_ai_api_key="g-test"))
        assert isinstance(model, GeminiTextModel)
