"""Generative-model gateway.

Callers see a single ``TextModel`` interface: one-shot ``complete`` and
multi-turn ``chat``. Two backends are available (Anthropic, Gemini); both
return plain text and translate provider failures into ``UpstreamError`` so
the pipeline has one exception type to recover from.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import anthropic
import httpx
import structlog
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from advisor.config import Settings
from advisor.errors import UpstreamError
from advisor.models.contracts import ChatMessage

log = structlog.get_logger("llm")


class TextModel(Protocol):
    async def complete(self, prompt: str, *, system: str | None = None) -> str: ...

    async def chat(self, messages: Sequence[ChatMessage], *, system: str) -> str: ...


class AnthropicTextModel:
    def __init__(
        self,
        client: anthropic.AsyncAnthropic,
        model: str,
        max_tokens: int = 2048,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        return await self._create([{"role": "user", "content": prompt}], system)

    async def chat(self, messages: Sequence[ChatMessage], *, system: str) -> str:
        history = [{"role": m.role, "content": m.content} for m in messages]
        return await self._create(history, system)

    async def _create(self, messages: list[dict[str, str]], system: str | None) -> str:
        kwargs: dict = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        try:
            response = await self.client.messages.create(**kwargs)
        except anthropic.APIStatusError as e:
            log.warning("llm_api_error", provider="anthropic", status=e.status_code)
            raise UpstreamError(e.status_code, str(e.message), source="model") from e
        except anthropic.APIConnectionError as e:
            log.warning("llm_connection_error", provider="anthropic", error=str(e))
            raise UpstreamError(None, type(e).__name__, source="model") from e
        except anthropic.APIError as e:
            log.warning("llm_api_error", provider="anthropic", error=type(e).__name__)
            raise UpstreamError(None, str(e.message), source="model") from e

        usage = getattr(response, "usage", None)
        if usage is not None:
            log.info(
                "llm_tokens",
                provider="anthropic",
                model=self.model,
                input_tokens=getattr(usage, "input_tokens", None),
                output_tokens=getattr(usage, "output_tokens", None),
            )

        text = ""
        for block in response.content:
            if hasattr(block, "text"):
                text += block.text
        return text


class GeminiTextModel:
    def __init__(self, client: genai.Client, model: str, max_tokens: int = 2048) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        return await self._generate(prompt, system)

    async def chat(self, messages: Sequence[ChatMessage], *, system: str) -> str:
        # Gemini names the assistant role "model"
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.content)],
            )
            for m in messages
        ]
        return await self._generate(contents, system)

    async def _generate(self, contents: str | list[types.Content], system: str | None) -> str:
        config = types.GenerateContentConfig(
            system_instruction=system,
            max_output_tokens=self.max_tokens,
        )
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as e:
            log.warning("llm_api_error", provider="gemini", status=e.code)
            raise UpstreamError(e.code, str(e.message or e.status), source="model") from e
        except httpx.HTTPError as e:
            log.warning("llm_connection_error", provider="gemini", error=str(e))
            raise UpstreamError(None, type(e).__name__, source="model") from e
        return response.text or ""


def build_text_model(config: Settings) -> TextModel | None:
    """Construct the configured backend, or None when it has no API key."""
    if not config.llm_configured:
        log.info("llm_not_configured", provider=config.llm_provider)
        return None
    if config.llm_provider == "gemini":
        return GeminiTextModel(
            genai.Client(api_key=config.google_ai_api_key),
            config.gemini_model,
            config.llm_max_tokens,
        )
    return AnthropicTextModel(
        anthropic.AsyncAnthropic(api_key=config.anthropic_api_key),
        config.anthropic_model,
        config.llm_max_tokens,
    )
