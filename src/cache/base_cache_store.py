# src/cache/base_cache_store.py — v2
"""Abstract result cache interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from docmeta.core.models import DocumentMetadata


class BaseResultCache(ABC):
    """Unified interface for result cache backends."""

    @abstractmethod
    def get(self, file_path: str) -> DocumentMetadata | None:
        """Return cached metadata if the file is unchanged since it was stored."""

    @abstractmethod
    def put(self, file_path: str, metadata: DocumentMetadata) -> None:
        """Store metadata for a file, replacing any previous entry."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every cached entry."""

    @abstractmethod
    def list_paths(self) -> list[str]:
        """File paths currently cached."""
