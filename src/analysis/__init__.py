# src/analysis/__init__.py — v1
"""Analysis orchestration: timeout race, response normalization, orchestrator."""
