# src/core/errors.py — v1
"""Error hierarchy for document analysis.

Hierarchy:
    DocMetaError (base)
    ├── CredentialUnavailable   every credential source failed (fatal)
    ├── PreprocessingFailed     truncation failed, original file is used
    ├── AnalysisTimeout         remote call lost the race against its timer
    ├── AnalysisFailed          remote call raised (provider error wrapped)
    ├── ResponseUnparseable     model output is not a JSON object
    └── CacheIOError            cache store could not be read or written

PreprocessingFailed and CacheIOError never reach callers of the orchestrator:
they are logged and the operation degrades.
"""

from __future__ import annotations


class DocMetaError(Exception):
    """Base exception for all docmeta errors."""


class CredentialUnavailable(DocMetaError):
    """Raised when every credential source in the fallback chain failed.

    Attributes:
        attempts: One line per source tried, "<source>: <reason>".
    """

    def __init__(self, attempts: list[str]) -> None:
        self.attempts = list(attempts)
        trail = "\n".join(f"  {i}. {a}" for i, a in enumerate(self.attempts, 1))
        super().__init__(f"API credential not found. Sources tried:\n{trail}")


class PreprocessingFailed(DocMetaError):
    """Raised when a bounded-size copy of a document could not be produced."""

    def __init__(self, file_path: str, reason: str) -> None:
        self.file_path = file_path
        super().__init__(f"Failed to preprocess {file_path}: {reason}")


class AnalysisTimeout(DocMetaError):
    """Raised when a remote call does not complete within its timeout."""

    def __init__(self, operation: str, timeout_s: float) -> None:
        self.operation = operation
        self.timeout_s = timeout_s
        super().__init__(f"{operation} timed out after {timeout_s:g} seconds")


class AnalysisFailed(DocMetaError):
    """Raised when a remote call (analysis or connectivity check) itself fails."""

    def __init__(self, operation: str, model: str, reason: str) -> None:
        self.operation = operation
        self.model = model
        super().__init__(f"{operation} with {model} failed: {reason}")


class ResponseUnparseable(DocMetaError):
    """Raised when model output cannot be parsed into a JSON object.

    Attributes:
        raw_content: The unmodified model output, kept for diagnosis.
    """

    def __init__(self, raw_content: str, reason: str) -> None:
        self.raw_content = raw_content
        super().__init__(
            f"Failed to parse document analysis ({reason}); "
            f"content length: {len(raw_content)}"
        )


class CacheIOError(DocMetaError):
    """Raised internally when the cache store cannot be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cache store {path}: {reason}")
