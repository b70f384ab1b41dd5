# src/cache/__init__.py — v1
"""Content-addressed result cache."""
