# src/batch/models.py — v2
"""Batch processing models: ScanEntry, BatchResult."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from docmeta.core.models import AnalysisResult


class ScanEntry(BaseModel):
    """A single file discovered during a sample-directory scan."""

    file_path: str
    filename: str
    format: Literal["pdf", "epub"]
    size_bytes: int


class BatchResult(BaseModel):
    """Summary of a bounded batch run."""

    total_files_found: int
    processed: int = 0
    cached: int = 0
    errors: int = 0
    results: list[AnalysisResult] = Field(default_factory=list)
    duration_seconds: float = 0.0
