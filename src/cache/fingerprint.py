# src/cache/fingerprint.py — v2
"""Content hashing used to validate cache entries.

The hash covers the full file bytes, so a cached result survives copies and
moves of identical content and is invalidated by any byte-level change.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

_CHUNK_SIZE = 1024 * 1024


def compute_file_hash(file_path: str | Path) -> str:
    """SHA-256 hex digest of the file's full contents.

    Raises:
        OSError: If the file cannot be read.
    """
    digest = hashlib.sha256()
    with Path(file_path).open("rb") as fh:
        for block in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(block)
    return digest.hexdigest()
