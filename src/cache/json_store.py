# src/cache/json_store.py — v2
"""JSON file-based result cache (default backend).

All entries live in a single JSON document mapping file path → CacheEntry,
rewritten wholesale on every mutation. The store is best-effort: a missing,
corrupt or unwritable store degrades to an empty cache and never aborts an
analysis.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from pydantic import ValidationError

from docmeta.cache.base_cache_store import BaseResultCache
from docmeta.cache.fingerprint import compute_file_hash
from docmeta.cache.models import CacheEntry
from docmeta.core.errors import CacheIOError
from docmeta.core.models import DocumentMetadata

logger = logging.getLogger(__name__)


class JsonResultCache(BaseResultCache):
    """Content-addressed result cache persisted to one JSON file."""

    def __init__(self, cache_file: Path) -> None:
        self._cache_file = Path(cache_file).expanduser()

    @property
    def cache_file(self) -> Path:
        return self._cache_file

    def get(self, file_path: str) -> DocumentMetadata | None:
        """Return cached metadata if the file's content hash still matches.

        A stale entry (hash mismatch) is purged immediately. A missing file
        returns None and leaves the store untouched.
        """
        store = self._load()
        entry = store.get(file_path)
        if entry is None:
            return None

        if not Path(file_path).is_file():
            return None

        try:
            current_hash = compute_file_hash(file_path)
        except OSError as e:
            logger.warning("Error checking file hash for %s: %s", file_path, e)
            return None

        if entry.file_hash != current_hash:
            logger.info("File changed since it was cached, dropping entry: %s", file_path)
            del store[file_path]
            self._save_quietly(store)
            return None

        return entry.metadata

    def put(self, file_path: str, metadata: DocumentMetadata) -> None:
        """Replace the entry for file_path with freshly hashed metadata."""
        try:
            file_hash = compute_file_hash(file_path)
        except OSError as e:
            logger.warning("Failed to save %s to cache: %s", file_path, e)
            return

        store = self._load()
        store[file_path] = CacheEntry(
            file_path=file_path,
            metadata=metadata,
            timestamp=int(time.time() * 1000),
            file_hash=file_hash,
        )
        self._save_quietly(store)

    def clear(self) -> None:
        """Delete the persisted store."""
        try:
            self._cache_file.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to clear cache %s: %s", self._cache_file, e)

    def list_paths(self) -> list[str]:
        """File paths currently cached, in store order."""
        return list(self._load())

    # --- Store I/O ---

    def _load(self) -> dict[str, CacheEntry]:
        """Read the store; anything unreadable counts as empty."""
        if not self._cache_file.exists():
            return {}
        try:
            data = json.loads(self._cache_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load cache %s: %s", self._cache_file, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring cache %s: top level is not an object", self._cache_file)
            return {}

        store: dict[str, CacheEntry] = {}
        for key, raw_entry in data.items():
            try:
                store[key] = CacheEntry.model_validate(raw_entry)
            except ValidationError as e:
                logger.warning("Skipping invalid cache entry %s: %s", key, e.error_count())
        return store

    def _save(self, store: dict[str, CacheEntry]) -> None:
        payload = {
            key: entry.model_dump(mode="json", by_alias=True)
            for key, entry in store.items()
        }
        try:
            self._cache_file.parent.mkdir(parents=True, exist_ok=True)
            self._cache_file.write_text(
                json.dumps(payload, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as e:
            raise CacheIOError(str(self._cache_file), str(e)) from e

    def _save_quietly(self, store: dict[str, CacheEntry]) -> None:
        try:
            self._save(store)
        except CacheIOError as e:
            logger.warning("Failed to save cache: %s", e)
