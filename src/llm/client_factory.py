# src/llm/client_factory.py — v3
"""Build the LLM client used for one analysis.

The orchestrator resolves the API credential first and then asks this module
for a client bound to (provider, model, key). Adapters are imported lazily so
an unused provider SDK never has to be installed.
"""

from __future__ import annotations

import importlib
import logging

from docmeta.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# provider name → "module.path.ClassName"
_ADAPTERS: dict[str, str] = {
    "google": "docmeta.llm.adapters.google_adapter.GoogleAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when no adapter is registered under the requested provider name."""


def available_providers() -> list[str]:
    """Registered provider names, sorted."""
    return sorted(_ADAPTERS)


def create_llm_client(
    provider: str,
    model: str,
    api_key: str = "",
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the adapter registered for provider.

    Args:
        provider: Provider identifier (google).
        model: Model name (e.g. gemini-2.0-flash).
        api_key: Resolved API credential.
        **kwargs: Passed through to the adapter constructor.

    Raises:
        UnsupportedProviderError: If provider is not registered.
        TypeError: If the registered class is not a BaseLLMClient.
    """
    try:
        class_path = _ADAPTERS[provider]
    except KeyError:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(available_providers())}"
        ) from None

    adapter_cls = _load_adapter(class_path)
    logger.debug("Creating %s client for model %s", provider, model)
    return adapter_cls(model=model, api_key=api_key, **kwargs)


def register_provider(name: str, class_path: str) -> None:
    """Register (or replace) the adapter class path for a provider name."""
    _ADAPTERS[name] = class_path
    logger.info("Registered LLM provider: %s → %s", name, class_path)


def _load_adapter(class_path: str) -> type[BaseLLMClient]:
    module_path, class_name = class_path.rsplit(".", 1)
    adapter_cls = getattr(importlib.import_module(module_path), class_name)
    if not (isinstance(adapter_cls, type) and issubclass(adapter_cls, BaseLLMClient)):
        raise TypeError(f"{class_path} is not a BaseLLMClient implementation")
    return adapter_cls
