# src/preprocessing/__init__.py — v1
"""Document preprocessing before remote analysis."""
