# tests/unit/llm/test_unit_prompts.py — v1
"""Tests for llm/prompts.py — prompt assembly."""

from __future__ import annotations

from docmeta.llm.prompts import connectivity_messages, document_analysis_messages


class TestDocumentAnalysisMessages:
    def test_asks_for_all_fields(self):
        system, messages = document_analysis_messages()
        assert "document analyst" in system
        assert len(messages) == 1
        text = messages[0].content
        for label in ("Title", "Author", "Document Type", "Summary", "confidence"):
            assert label in text


class TestConnectivityMessages:
    def test_greeting_prompt(self):
        system, messages = connectivity_messages()
        assert "helpful assistant" in system
        assert messages[0].role == "user"
        assert "Hello, this is a test!" in messages[0].content
