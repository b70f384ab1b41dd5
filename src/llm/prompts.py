# src/llm/prompts.py — v1
"""Prompt texts sent to the remote model."""

from __future__ import annotations

from docmeta.llm.models import Message

DOCUMENT_ANALYST_ROLE = "You are an expert document analyst and metadata extractor."

DOCUMENT_ANALYST_OBJECTIVE = """\
Given a PDF or EPUB document, extract the following metadata as a JSON object:
- Title: The title of the document
- Author: The author or authors of the document
- Document Type: Whether this is a book, paper, article, or unknown
- Summary: A brief summary of the document content

Analyze the document carefully and provide confidence scores (0 to 1) for each field.
"""

CONNECTIVITY_ROLE = "You are a helpful assistant."

CONNECTIVITY_OBJECTIVE = "Respond with a simple test message."

CONNECTIVITY_PROBE = 'Say "Hello, this is a test!"'


def document_analysis_messages() -> tuple[str, list[Message]]:
    """System prompt and user messages for metadata extraction."""
    return DOCUMENT_ANALYST_ROLE, [Message(role="user", content=DOCUMENT_ANALYST_OBJECTIVE)]


def connectivity_messages() -> tuple[str, list[Message]]:
    """System prompt and user messages for the connectivity check."""
    system = f"{CONNECTIVITY_ROLE}\n{CONNECTIVITY_OBJECTIVE}"
    return system, [Message(role="user", content=CONNECTIVITY_PROBE)]
