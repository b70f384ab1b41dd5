# src/llm/models.py — v2
"""LLM-specific types: Message, DocumentAttachment, LLMResponse."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel

MEDIA_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".epub": "application/epub+zip",
}


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class DocumentAttachment(BaseModel):
    """File payload sent alongside a prompt."""

    data: bytes
    media_type: str
    filename: str

    @classmethod
    def from_path(cls, path: str | Path) -> DocumentAttachment:
        """Read a document from disk, deriving its media type from the extension."""
        p = Path(path)
        media_type = MEDIA_TYPES.get(p.suffix.lower(), "application/octet-stream")
        return cls(data=p.read_bytes(), media_type=media_type, filename=p.name)


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str
    latency_ms: int = 0
    raw_response: Any = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens
