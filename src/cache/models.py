# src/cache/models.py — v2
"""Cache domain model: CacheEntry."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from docmeta.core.models import DocumentMetadata


class CacheEntry(BaseModel):
    """Single cache entry linking a file path and its content hash to metadata.

    Persisted with camelCase keys (filePath, fileHash); timestamp is epoch millis.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    file_path: str = Field(alias="filePath")
    metadata: DocumentMetadata
    timestamp: int
    file_hash: str = Field(alias="fileHash")
