# src/llm/__init__.py — v1
"""Provider-neutral LLM client interface and adapters."""
