# src/__init__.py — v1
"""docmeta: bibliographic metadata extraction for PDF and EPUB files."""
