# src/credentials/__init__.py — v1
"""API credential resolution."""
