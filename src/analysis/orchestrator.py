# src/analysis/orchestrator.py — v1
"""Analysis orchestrator — cache lookup, credential, preprocessing, remote call.

Per-invocation states (also attached to log records as the context step):

    resolving_credential → preprocessing → calling → normalizing → caching
    → cleanup → done | failed

Cleanup of a truncated copy runs on every exit path, including timeouts and
parse failures. The cache write is applied only when the remote call won its
timeout race.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable

from docmeta.analysis.normalizer import normalize_response
from docmeta.analysis.race import CompletionToken, race_with_timeout
from docmeta.cache.base_cache_store import BaseResultCache
from docmeta.config.settings import Settings
from docmeta.core.errors import AnalysisFailed, AnalysisTimeout
from docmeta.core.models import AnalysisResult, DocumentMetadata
from docmeta.credentials.resolver import CredentialResolver
from docmeta.llm.base_client import BaseLLMClient
from docmeta.llm.client_factory import create_llm_client
from docmeta.llm.models import DocumentAttachment, LLMResponse
from docmeta.llm.prompts import connectivity_messages, document_analysis_messages
from docmeta.logging.context import clear_context, set_analysis_context, set_step
from docmeta.preprocessing.page_truncator import DocumentPreprocessor

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., BaseLLMClient]


class AnalysisState(str, Enum):
    RESOLVING_CREDENTIAL = "resolving_credential"
    PREPROCESSING = "preprocessing"
    CALLING = "calling"
    NORMALIZING = "normalizing"
    CACHING = "caching"
    CLEANUP = "cleanup"
    DONE = "done"
    FAILED = "failed"


class AnalysisOrchestrator:
    """Compose cache, credentials, preprocessing and the LLM call for one file at a time."""

    def __init__(
        self,
        settings: Settings,
        credentials: CredentialResolver,
        preprocessor: DocumentPreprocessor,
        cache: BaseResultCache | None = None,
        client_factory: ClientFactory = create_llm_client,
    ) -> None:
        self._settings = settings
        self._credentials = credentials
        self._preprocessor = preprocessor
        self._cache = cache
        self._client_factory = client_factory

    async def analyze(
        self,
        file_path: str | Path,
        model: str | None = None,
        use_cache: bool = True,
    ) -> DocumentMetadata:
        """Return metadata for file_path, from the cache when possible."""
        result = await self.run(file_path, model=model, use_cache=use_cache)
        return result.metadata

    async def run(
        self,
        file_path: str | Path,
        model: str | None = None,
        use_cache: bool = True,
    ) -> AnalysisResult:
        """Like analyze(), but also report whether the cache answered and token usage.

        With use_cache=False the cache is not read, but the fresh result is
        still written through.

        Raises:
            CredentialUnavailable: No API credential could be resolved.
            AnalysisTimeout: The remote call lost the race against its timeout.
            AnalysisFailed: The remote call raised.
            ResponseUnparseable: The model output is not a JSON object.
        """
        source = str(file_path)
        model_name = model or self._settings.default_model
        set_analysis_context(source, model_name)
        try:
            if use_cache and self._cache is not None:
                cached = self._cache.get(source)
                if cached is not None:
                    logger.info("Using cached results for %s", Path(source).name)
                    set_step(AnalysisState.DONE.value)
                    return AnalysisResult(
                        file_path=source, metadata=cached, from_cache=True,
                    )
            return await self._analyze_uncached(source, model_name)
        finally:
            clear_context()

    async def check_connectivity(self, model: str | None = None) -> LLMResponse:
        """Send a short text prompt to verify credential and provider access."""
        model_name = model or self._settings.default_model
        api_key = await self._credentials.resolve()
        client = self._client("Connectivity check", model_name, api_key)
        system, messages = connectivity_messages()

        logger.info("Sending connectivity check to %s...", model_name)
        try:
            response = await race_with_timeout(
                client.complete(messages, system=system),
                self._settings.connectivity_timeout_s,
                "Connectivity check",
            )
        except AnalysisTimeout:
            raise
        except Exception as e:
            raise AnalysisFailed("Connectivity check", model_name, str(e)) from e

        logger.info("Connectivity check succeeded (%d tokens)", response.total_tokens)
        return response

    # --- Internals ---

    def _client(self, operation: str, model_name: str, api_key: str) -> BaseLLMClient:
        """Build the provider client; construction errors become AnalysisFailed."""
        try:
            return self._client_factory(
                self._settings.llm_provider, model_name, api_key=api_key
            )
        except Exception as e:
            raise AnalysisFailed(operation, model_name, str(e)) from e

    async def _analyze_uncached(self, source: str, model_name: str) -> AnalysisResult:
        set_step(AnalysisState.RESOLVING_CREDENTIAL.value)
        try:
            api_key = await self._credentials.resolve()
        except Exception:
            set_step(AnalysisState.FAILED.value)
            raise

        set_step(AnalysisState.PREPROCESSING.value)
        original = Path(source)
        effective = original
        if self._preprocessor.supports(original):
            effective = self._preprocessor.prepare(
                original, self._settings.max_preprocess_pages
            )
            if effective != original:
                logger.info("Using truncated PDF: %s", effective)

        token = CompletionToken()
        try:
            set_step(AnalysisState.CALLING.value)
            response = await self._call(effective, model_name, api_key, token, source)

            set_step(AnalysisState.NORMALIZING.value)
            logger.debug("Raw model response: %s", response.content)
            metadata = normalize_response(response.content)

            set_step(AnalysisState.CACHING.value)
            self._write_through(token, source, metadata)
        except Exception as e:
            set_step(AnalysisState.FAILED.value)
            logger.debug("Analysis failed: %s", e)
            raise
        finally:
            if effective != original:
                set_step(AnalysisState.CLEANUP.value)
                self._preprocessor.cleanup(effective)

        set_step(AnalysisState.DONE.value)
        return AnalysisResult(
            file_path=source,
            metadata=metadata,
            model=response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            latency_ms=response.latency_ms,
        )

    async def _call(
        self,
        effective: Path,
        model_name: str,
        api_key: str,
        token: CompletionToken,
        source: str,
    ) -> LLMResponse:
        client = self._client(f"Analysis of {Path(source).name}", model_name, api_key)
        system, messages = document_analysis_messages()
        attachment = DocumentAttachment.from_path(effective)

        logger.info("Starting analysis of %s with %s...", Path(source).name, model_name)
        try:
            response = await race_with_timeout(
                client.complete_with_document(messages, attachment, system=system),
                self._settings.analysis_timeout_s,
                "Document analysis",
                token,
            )
        except AnalysisTimeout:
            raise
        except Exception as e:
            raise AnalysisFailed(
                f"Analysis of {Path(source).name}", model_name, str(e)
            ) from e

        logger.info(
            "Analysis completed: provider=%s, model=%s, tokens in=%d out=%d, %dms",
            response.provider, response.model,
            response.input_tokens, response.output_tokens, response.latency_ms,
        )
        return response

    def _write_through(
        self, token: CompletionToken, source: str, metadata: DocumentMetadata
    ) -> None:
        if self._cache is None:
            return
        if not token.claimed:
            logger.debug("Call was abandoned, skipping cache write for %s", source)
            return
        self._cache.put(source, metadata)
