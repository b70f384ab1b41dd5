# src/llm/adapters/google_adapter.py — v2
"""Google Gemini adapter implementing BaseLLMClient.

Uses the google-generativeai SDK. A document travels as one inline-data part
after the prompt text; Gemini reads PDF and EPUB payloads natively, so no
local text extraction happens before the call.
"""

from __future__ import annotations

import time
from typing import Any

from docmeta.llm.base_client import BaseLLMClient
from docmeta.llm.models import DocumentAttachment, LLMResponse, Message

_GEMINI_ROLES = {"user": "user", "assistant": "model", "system": "user"}


def _document_part(document: DocumentAttachment) -> dict[str, Any]:
    return {"inline_data": {"mime_type": document.media_type, "data": document.data}}


def _token_usage(resp: Any) -> tuple[int, int]:
    """(prompt, candidates) token counts; zeros when the SDK omits usage."""
    usage = getattr(resp, "usage_metadata", None)
    if usage is None:
        return 0, 0
    return (
        getattr(usage, "prompt_token_count", 0) or 0,
        getattr(usage, "candidates_token_count", 0) or 0,
    )


class GoogleAdapter(BaseLLMClient):
    """Gemini client bound to one model and API key."""

    def __init__(self, model: str = "gemini-2.0-flash", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> LLMResponse:
        contents = [
            {"role": _GEMINI_ROLES[m.role], "parts": [{"text": m.content}]}
            for m in messages
        ]
        config = {"max_output_tokens": max_tokens, "temperature": temperature}
        return await self._generate(contents, system, config)

    async def complete_with_document(
        self,
        messages: list[Message],
        document: DocumentAttachment,
        system: str | None = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        parts: list[dict[str, Any]] = [{"text": m.content} for m in messages]
        parts.append(_document_part(document))
        return await self._generate(parts, system, {"max_output_tokens": max_tokens})

    @property
    def provider_name(self) -> str:
        return "google"

    async def _generate(
        self,
        contents: Any,
        system: str | None,
        generation_config: dict[str, Any],
    ) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        gemini = genai.GenerativeModel(self._model, system_instruction=system)

        started = time.monotonic()
        resp = await gemini.generate_content_async(
            contents, generation_config=generation_config,
        )
        input_tokens, output_tokens = _token_usage(resp)
        return LLMResponse(
            content=resp.text or "",
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=self._model,
            provider=self.provider_name,
            latency_ms=int((time.monotonic() - started) * 1000),
            raw_response=resp,
        )
