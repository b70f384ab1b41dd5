# src/api/facade.py — v2
"""Public API facade — shared per-process state and entry points.

Usage:
    from docmeta.api.facade import analyze_document, create_context
    context = create_context()
    result = await analyze_document("paper.pdf", context=context)

The credential resolver and preprocessor are shared by every call made with
the same AppContext; nothing is held in module-level globals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from docmeta.analysis.orchestrator import AnalysisOrchestrator, ClientFactory
from docmeta.cache.base_cache_store import BaseResultCache
from docmeta.cache.json_store import JsonResultCache
from docmeta.config.settings import Settings
from docmeta.core.models import AnalysisResult
from docmeta.credentials.resolver import CredentialResolver
from docmeta.llm.client_factory import create_llm_client
from docmeta.llm.models import LLMResponse
from docmeta.preprocessing.page_truncator import DocumentPreprocessor

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Process-wide collaborators, built once and passed explicitly."""

    settings: Settings
    credentials: CredentialResolver
    preprocessor: DocumentPreprocessor
    cache: BaseResultCache | None
    client_factory: ClientFactory = field(default=create_llm_client)

    def orchestrator(self) -> AnalysisOrchestrator:
        return AnalysisOrchestrator(
            settings=self.settings,
            credentials=self.credentials,
            preprocessor=self.preprocessor,
            cache=self.cache,
            client_factory=self.client_factory,
        )


def create_context(
    settings: Settings | None = None,
    client_factory: ClientFactory = create_llm_client,
) -> AppContext:
    """Build an AppContext from settings (loaded from .env if None)."""
    settings = settings or Settings()
    cache = JsonResultCache(settings.cache_file) if settings.cache_enabled else None
    return AppContext(
        settings=settings,
        credentials=CredentialResolver.from_settings(settings),
        preprocessor=DocumentPreprocessor(settings.temp_dir),
        cache=cache,
        client_factory=client_factory,
    )


async def analyze_document(
    file_path: str | Path,
    model: str | None = None,
    use_cache: bool = True,
    context: AppContext | None = None,
) -> AnalysisResult:
    """Analyze one PDF/EPUB file end-to-end and return its metadata."""
    context = context or create_context()
    return await context.orchestrator().run(file_path, model=model, use_cache=use_cache)


async def check_connection(
    model: str | None = None,
    context: AppContext | None = None,
) -> LLMResponse:
    """Verify that a credential resolves and the model answers."""
    context = context or create_context()
    return await context.orchestrator().check_connectivity(model=model)


def list_cache(context: AppContext | None = None) -> list[str]:
    """File paths currently in the result cache."""
    context = context or create_context()
    if context.cache is None:
        return []
    return context.cache.list_paths()


def clear_cache(context: AppContext | None = None) -> None:
    """Drop every cached result."""
    context = context or create_context()
    if context.cache is not None:
        context.cache.clear()
        logger.info("Cache cleared")
