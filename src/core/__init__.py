# src/core/__init__.py — v1
"""Domain models and error hierarchy."""
