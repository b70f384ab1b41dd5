# src/batch/__init__.py — v1
"""Sample-directory scanning and bounded batch analysis."""
