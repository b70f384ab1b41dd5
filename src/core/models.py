# src/core/models.py — v2
"""Shared Pydantic domain models: ConfidenceField and DocumentMetadata.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

from typing import Generic, Literal, TypeVar, get_args

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DocumentType = Literal["book", "paper", "article", "unknown"]

DOCUMENT_TYPES: tuple[str, ...] = get_args(DocumentType)

DEFAULT_CONFIDENCE = 0.5


class ConfidenceField(BaseModel, Generic[T]):
    """Extracted value paired with the model's self-reported certainty."""

    model_config = ConfigDict(frozen=True)

    value: T
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0.0, le=1.0)


class DocumentMetadata(BaseModel):
    """Canonical bibliographic metadata for one analyzed document."""

    model_config = ConfigDict(frozen=True)

    title: ConfidenceField[str]
    author: ConfidenceField[str]
    document_type: ConfidenceField[DocumentType]
    summary: ConfidenceField[str]


class AnalysisResult(BaseModel):
    """Outcome of one analyze call, with provenance of the metadata."""

    file_path: str
    metadata: DocumentMetadata
    from_cache: bool = False
    model: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0
