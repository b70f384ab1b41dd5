# src/llm/adapters/__init__.py — v1
"""Concrete LLM provider adapters."""
