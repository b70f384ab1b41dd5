# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides settings rooted in tmp_path, generated PDFs, sample metadata and mock
LLM clients. No network access — the LLM and the secret CLI are always mocked.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from docmeta.config.settings import Settings
from docmeta.core.models import DocumentMetadata
from docmeta.llm.models import LLMResponse


# === FIXTURES: Settings ===


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with cache and temp dirs under tmp_path, no .env file."""
    return Settings(
        _env_file=None,
        cache_dir=tmp_path / ".cache",
        sample_dirs=str(tmp_path / "samples"),
    )


@pytest.fixture
def tmp_cache_dir(settings: Settings) -> Path:
    """Cache directory used by the settings fixture."""
    return settings.cache_dir


# === FIXTURES: Documents ===


def write_pdf(path: Path, pages: int) -> Path:
    """Write a PDF with `pages` pages, each carrying its page number as text."""
    import fitz  # PyMuPDF

    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {i + 1} of the sample document")
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Factory: make_pdf(pages, name='doc.pdf') → path of a generated PDF."""

    def _make(pages: int, name: str = "doc.pdf") -> Path:
        target = tmp_path / "docs" / name
        target.parent.mkdir(parents=True, exist_ok=True)
        return write_pdf(target, pages)

    return _make


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """Opaque EPUB-named file (content is never parsed)."""
    path = tmp_path / "docs" / "book.epub"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"PK\x03\x04 fake epub payload")
    return path


# === FIXTURES: Sample data ===


def build_metadata(
    title: str = "Deep Learning",
    author: str = "Ian Goodfellow",
    document_type: str = "book",
    summary: str = "An introduction to deep learning.",
    confidence: float = 0.9,
) -> DocumentMetadata:
    return DocumentMetadata.model_validate({
        "title": {"value": title, "confidence": confidence},
        "author": {"value": author, "confidence": confidence},
        "document_type": {"value": document_type, "confidence": confidence},
        "summary": {"value": summary, "confidence": confidence},
    })


@pytest.fixture
def sample_metadata() -> DocumentMetadata:
    """Minimal valid DocumentMetadata."""
    return build_metadata()


# === FIXTURES: Mock LLM ===

CAPITALIZED_RESPONSE = """```json
{
  "Title": "Deep Learning",
  "Author": "Ian Goodfellow",
  "Document Type": "book",
  "Summary": "An introduction to deep learning.",
  "Confidence Scores": {"Title": 0.9, "Author": 0.9, "Document Type": 0.9, "Summary": 0.9}
}
```"""


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    """Standard mock LLM response in the capitalized-label shape."""
    return LLMResponse(
        content=CAPITALIZED_RESPONSE,
        input_tokens=1200,
        output_tokens=80,
        model="gemini-2.0-flash",
        provider="google",
        latency_ms=500,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient with default response."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.complete_with_document = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "mock"
    return client


@pytest.fixture
def client_factory(mock_llm_client: AsyncMock) -> MagicMock:
    """Client factory returning mock_llm_client regardless of provider/model."""
    return MagicMock(return_value=mock_llm_client)


@pytest.fixture
def metadata_factory() -> Callable[..., DocumentMetadata]:
    """Factory: metadata_factory(title=..., ...) → DocumentMetadata."""
    return build_metadata
