# src/analysis/normalizer.py — v1
"""Turn free-form model output into canonical DocumentMetadata.

The model answers with JSON whose key naming is not stable. Observed shapes:

    {"Title": "...", "Author": "...", "Document Type": "...", "Summary": "...",
     "Confidence Scores": {"Title": 0.9, ...}}

    {"title": {"value": "...", "confidence": 0.9}, "document_type": {...}, ...}

For each field the known key variants are tried in a fixed order; anything
missing falls back to a default instead of failing. Only output that is not a
JSON object at all is an error.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from typing import Any

from docmeta.core.errors import ResponseUnparseable
from docmeta.core.models import DEFAULT_CONFIDENCE, DOCUMENT_TYPES, DocumentMetadata

_FENCE_OPEN = re.compile(r"^```[\w+.-]*[ \t]*\r?\n?")
_FENCE_CLOSE = re.compile(r"\r?\n?```$")


@dataclass(frozen=True)
class FieldSpec:
    """Key variants and default for one metadata field."""

    name: str  # snake_case key, also the DocumentMetadata attribute
    label: str  # capitalized English label
    default: str


FIELD_SPECS: tuple[FieldSpec, ...] = (
    FieldSpec("title", "Title", "Unknown"),
    FieldSpec("author", "Author", "Unknown"),
    FieldSpec("document_type", "Document Type", "unknown"),
    FieldSpec("summary", "Summary", "No summary available"),
)


def strip_code_fences(content: str) -> str:
    """Remove a leading ```[lang] fence and a trailing ``` fence, if present."""
    text = content.strip()
    text = _FENCE_OPEN.sub("", text, count=1)
    text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def parse_response_json(content: str) -> dict[str, Any]:
    """Parse model output (possibly markdown-fenced) into a JSON object.

    Raises:
        ResponseUnparseable: If the content is not a JSON object.
    """
    cleaned = strip_code_fences(content or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ResponseUnparseable(content or "", str(e)) from e
    if not isinstance(data, dict):
        raise ResponseUnparseable(
            content, f"expected a JSON object, got {type(data).__name__}"
        )
    return data


def normalize_response(content: str) -> DocumentMetadata:
    """Parse and normalize raw model output in one step."""
    return normalize_metadata(parse_response_json(content))


def normalize_metadata(raw: dict[str, Any]) -> DocumentMetadata:
    """Map a parsed response of any known shape onto DocumentMetadata."""
    fields: dict[str, dict[str, Any]] = {}
    for field in FIELD_SPECS:
        value = _lookup_value(raw, field)
        if field.name == "document_type":
            value = coerce_document_type(value)
        fields[field.name] = {
            "value": value if value is not None else field.default,
            "confidence": _lookup_confidence(raw, field),
        }
    return DocumentMetadata.model_validate(fields)


def coerce_document_type(value: str | None) -> str:
    """Map a free-text type onto book/paper/article, else 'unknown'."""
    if not value:
        return "unknown"
    lowered = value.strip().lower()
    if lowered in DOCUMENT_TYPES:
        return lowered
    words = set(re.findall(r"[a-z]+", lowered))
    for candidate in ("book", "paper", "article"):
        if candidate in words or f"{candidate}s" in words:
            return candidate
    return "unknown"


def coerce_confidence(value: Any) -> float | None:
    """Read a confidence score; percentages in (1, 100] are scaled down.

    Returns None for anything that is not a finite number.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip().rstrip("%").strip()
        try:
            value = float(text)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    score = float(value)
    if math.isnan(score) or math.isinf(score):
        return None
    # above 1 means a 0..100 scale; no separate band for slightly-over-1 values
    if 1.0 < score <= 100.0:
        score /= 100.0
    return min(1.0, max(0.0, score))


# --- Lookups ---


def _lookup_value(raw: dict[str, Any], field: FieldSpec) -> str | None:
    for key in (field.label, field.name):
        value = _as_text(raw.get(key))
        if value is not None:
            return value
    return None


def _lookup_confidence(raw: dict[str, Any], field: FieldSpec) -> float:
    candidates = (
        _get_nested(raw, "Confidence Scores", field.label),
        raw.get(f"{field.label}_confidence"),
        _get_nested(raw, field.label, "confidence"),
        _get_nested(raw, field.name, "confidence"),
        _get_nested(raw, "confidence_scores", field.name),
        raw.get(f"{field.name}_confidence"),
    )
    for candidate in candidates:
        score = coerce_confidence(candidate)
        if score is not None:
            return score
    return DEFAULT_CONFIDENCE


def _get_nested(raw: dict[str, Any], outer: str, inner: str) -> Any:
    container = raw.get(outer)
    if isinstance(container, dict):
        return container.get(inner)
    return None


def _as_text(value: Any) -> str | None:
    """Flatten a raw field value to a non-empty string, or None."""
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, list):
        parts = [str(v).strip() for v in value if v is not None and str(v).strip()]
        value = ", ".join(parts)
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
