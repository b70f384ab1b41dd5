# src/llm/base_client.py — v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from docmeta.llm.models import DocumentAttachment, LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion."""

    @abstractmethod
    async def complete_with_document(
        self,
        messages: list[Message],
        document: DocumentAttachment,
        system: str | None = None,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        """Completion with a file attachment (PDF/EPUB) alongside the prompt."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, ...)."""
