# src/preprocessing/page_truncator.py — v1
"""Bounded-size document preprocessing using PyMuPDF (fitz).

Oversized page-oriented documents are cut down to their first pages before
being sent for remote analysis. Truncated copies live in a reserved temp
subtree and are the only files this module ever deletes.
Requires the 'pymupdf' package.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path

from docmeta.core.errors import PreprocessingFailed

logger = logging.getLogger(__name__)

PAGE_ORIENTED_EXTENSIONS: frozenset[str] = frozenset({".pdf"})
ARTIFACT_PREFIX = "truncated_"


class DocumentPreprocessor:
    """Produce first-N-pages copies of PDFs inside a reserved temp directory.

    One instance is shared by every analysis in the process; the temp
    directory is created lazily the first time an artifact is written.
    """

    def __init__(self, temp_dir: Path) -> None:
        self._temp_dir = Path(temp_dir).expanduser().resolve()

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    def supports(self, file_path: str | Path) -> bool:
        """Whether the format allows partial (page-range) extraction."""
        return Path(file_path).suffix.lower() in PAGE_ORIENTED_EXTENSIONS

    def page_count(self, file_path: str | Path) -> int:
        """Number of pages in a PDF."""
        import fitz  # PyMuPDF

        with fitz.open(str(file_path)) as doc:
            return doc.page_count

    def prepare(self, file_path: str | Path, max_pages: int) -> Path:
        """Return a path to analyze: a truncated copy, or the original.

        The original path comes back unchanged when the format is not
        page-oriented, when the document has at most max_pages pages, when
        max_pages is below 1, or when truncation fails for any reason.
        """
        source = Path(file_path)
        if not self.supports(source):
            return source

        try:
            return self._truncate(source, max_pages)
        except PreprocessingFailed as e:
            logger.warning("%s; using original file", e)
            return source

    def is_temp_artifact(self, path: str | Path) -> bool:
        """Whether path lies strictly inside the reserved temp subtree."""
        candidate = Path(path).expanduser().resolve()
        return candidate != self._temp_dir and candidate.is_relative_to(self._temp_dir)

    def cleanup(self, path: str | Path) -> None:
        """Remove a truncated copy. Paths outside the temp subtree are ignored."""
        if not self.is_temp_artifact(path):
            logger.debug("Not a temp artifact, leaving in place: %s", path)
            return
        try:
            Path(path).unlink(missing_ok=True)
            logger.debug("Removed temp artifact %s", path)
        except OSError as e:
            logger.warning("Failed to clean up temp file %s: %s", path, e)

    def cleanup_all(self) -> None:
        """Remove the whole temp subtree."""
        if not self._temp_dir.exists():
            return
        try:
            shutil.rmtree(self._temp_dir)
        except OSError as e:
            logger.warning("Failed to clean up temp directory %s: %s", self._temp_dir, e)

    # --- Internals ---

    def _truncate(self, source: Path, max_pages: int) -> Path:
        if max_pages < 1:
            raise PreprocessingFailed(str(source), f"page cap must be at least 1, got {max_pages}")

        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise PreprocessingFailed(str(source), "pymupdf is not installed") from e

        try:
            src_doc = fitz.open(str(source))
        except Exception as e:
            raise PreprocessingFailed(str(source), f"cannot open PDF: {e}") from e

        target: Path | None = None
        try:
            total = src_doc.page_count
            if total <= max_pages:
                logger.debug("%s has %d pages, no truncation needed", source.name, total)
                return source

            target = self._new_artifact_path()
            out_doc = fitz.open()
            try:
                out_doc.insert_pdf(src_doc, from_page=0, to_page=max_pages - 1)
                out_doc.save(str(target))
            finally:
                out_doc.close()
        except Exception as e:
            if target is not None:
                target.unlink(missing_ok=True)
            raise PreprocessingFailed(str(source), str(e)) from e
        finally:
            src_doc.close()

        logger.info(
            "Created truncated PDF with %d of %d pages for faster analysis: %s",
            max_pages, total, target,
        )
        return target

    def _new_artifact_path(self) -> Path:
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        stamp = int(time.time() * 1000)
        candidate = self._temp_dir / f"{ARTIFACT_PREFIX}{stamp}.pdf"
        while candidate.exists():
            stamp += 1
            candidate = self._temp_dir / f"{ARTIFACT_PREFIX}{stamp}.pdf"
        return candidate
