# src/batch/scanner.py — v2
"""Batch scanner — sample-directory discovery and bounded batch analysis.

Backs the `test` CLI command: finds PDF/EPUB files in a few well-known
directories and analyzes the first few through the orchestrator.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from docmeta.batch.models import BatchResult, ScanEntry
from docmeta.core.errors import DocMetaError, ResponseUnparseable

if TYPE_CHECKING:
    from docmeta.analysis.orchestrator import AnalysisOrchestrator

logger = logging.getLogger(__name__)

# Supported file extensions mapped to format names
SUPPORTED_FORMATS: dict[str, str] = {
    ".pdf": "pdf",
    ".epub": "epub",
}


def detect_format(path: str | Path) -> str | None:
    """Detect document format from file extension."""
    return SUPPORTED_FORMATS.get(Path(path).suffix.lower())


def log_unparseable(exc: ResponseUnparseable) -> None:
    """Log an unparseable model reply together with its raw text."""
    logger.error("%s", exc)
    logger.error("Raw content: %s", exc.raw_content)


class BatchScanner:
    """Scan directories for documents and analyze a bounded number of them."""

    def __init__(self, orchestrator: AnalysisOrchestrator | None = None) -> None:
        self._orchestrator = orchestrator

    def scan(self, directories: list[Path], recursive: bool = False) -> list[ScanEntry]:
        """Discover supported files. Missing or unreadable directories are skipped."""
        entries: list[ScanEntry] = []
        for directory in directories:
            if not directory.is_dir():
                logger.debug("Skipping missing directory %s", directory)
                continue
            pattern_fn = directory.rglob if recursive else directory.glob
            try:
                paths = sorted(pattern_fn("*"))
            except OSError as e:
                logger.warning("Could not read directory %s: %s", directory, e)
                continue
            for path in paths:
                fmt = detect_format(path)
                if fmt is None or not path.is_file():
                    continue
                entries.append(
                    ScanEntry(
                        file_path=str(path.resolve()),
                        filename=path.name,
                        format=fmt,
                        size_bytes=path.stat().st_size,
                    )
                )

        logger.info("Scanned %d directories: found %d supported files", len(directories), len(entries))
        return entries

    async def process(
        self,
        entries: list[ScanEntry],
        limit: int,
        model: str | None = None,
    ) -> BatchResult:
        """Analyze the first `limit` entries; one failure does not stop the batch."""
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        if self._orchestrator is None:
            raise ValueError("BatchScanner.process requires an orchestrator")

        t0 = time.perf_counter()
        batch = BatchResult(total_files_found=len(entries))

        for entry in entries[:limit]:
            logger.info("--- Testing %s ---", entry.filename)
            try:
                result = await self._orchestrator.run(entry.file_path, model=model)
            except ResponseUnparseable as e:
                log_unparseable(e)
                batch.errors += 1
                continue
            except (DocMetaError, OSError) as e:
                logger.error("Error analyzing %s: %s", entry.filename, e)
                batch.errors += 1
                continue
            if result.from_cache:
                batch.cached += 1
            else:
                batch.processed += 1
            batch.results.append(result)

        batch.duration_seconds = time.perf_counter() - t0
        return batch
