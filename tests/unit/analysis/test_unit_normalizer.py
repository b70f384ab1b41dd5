# tests/unit/analysis/test_unit_normalizer.py — v1
"""Tests for analysis/normalizer.py — model output → DocumentMetadata."""

from __future__ import annotations

import json

import pytest

from docmeta.analysis.normalizer import (
    coerce_confidence,
    coerce_document_type,
    normalize_metadata,
    normalize_response,
    parse_response_json,
    strip_code_fences,
)
from docmeta.core.errors import ResponseUnparseable


class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'

    def test_crlf(self):
        assert strip_code_fences('```json\r\n{"a": 1}\r\n```') == '{"a": 1}'


class TestParseResponseJson:
    def test_fenced_object(self):
        assert parse_response_json('```json\n{"Title": "X"}\n```') == {"Title": "X"}

    def test_invalid_json(self):
        with pytest.raises(ResponseUnparseable) as exc_info:
            parse_response_json("I could not read this document.")
        assert exc_info.value.raw_content == "I could not read this document."

    def test_array_rejected(self):
        with pytest.raises(ResponseUnparseable, match="JSON object"):
            parse_response_json("[1, 2]")

    def test_empty_content(self):
        with pytest.raises(ResponseUnparseable):
            parse_response_json("")


class TestCapitalizedShape:
    def test_full_response(self, mock_llm_response):
        meta = normalize_response(mock_llm_response.content)
        assert meta.title.value == "Deep Learning"
        assert meta.author.value == "Ian Goodfellow"
        assert meta.document_type.value == "book"
        assert meta.summary.value == "An introduction to deep learning."
        assert meta.title.confidence == 0.9

    def test_label_confidence_suffix(self):
        meta = normalize_metadata({"Title": "T", "Title_confidence": 0.8})
        assert meta.title.confidence == 0.8

    def test_nested_label_confidence(self):
        meta = normalize_metadata({"Author": {"value": "A", "confidence": 0.3}})
        assert meta.author.value == "A"
        assert meta.author.confidence == 0.3


class TestSnakeCaseShape:
    def test_nested_objects(self):
        raw = {
            "title": {"value": "Attention Is All You Need", "confidence": 0.95},
            "author": {"value": "Vaswani et al.", "confidence": 0.9},
            "document_type": {"value": "paper", "confidence": 0.85},
            "summary": {"value": "Transformers.", "confidence": 0.7},
        }
        meta = normalize_metadata(raw)
        assert meta.title.value == "Attention Is All You Need"
        assert meta.document_type.value == "paper"
        assert meta.document_type.confidence == 0.85
        assert meta.summary.confidence == 0.7

    def test_flat_values_with_confidence_scores(self):
        raw = {
            "title": "T",
            "document_type": "article",
            "confidence_scores": {"title": 0.6, "document_type": 0.4},
        }
        meta = normalize_metadata(raw)
        assert meta.title.confidence == 0.6
        assert meta.document_type.value == "article"
        assert meta.document_type.confidence == 0.4

    def test_name_confidence_suffix(self):
        meta = normalize_metadata({"summary": "S", "summary_confidence": 0.25})
        assert meta.summary.confidence == 0.25


class TestPrecedence:
    def test_label_value_beats_snake_case(self):
        meta = normalize_metadata({"Title": "Label", "title": "snake"})
        assert meta.title.value == "Label"

    def test_confidence_scores_block_beats_nested(self):
        raw = {
            "Title": {"value": "T", "confidence": 0.2},
            "Confidence Scores": {"Title": 0.9},
        }
        assert normalize_metadata(raw).title.confidence == 0.9

    def test_unusable_candidate_skipped(self):
        raw = {"Title": "T", "Confidence Scores": {"Title": "high"}, "Title_confidence": 0.7}
        assert normalize_metadata(raw).title.confidence == 0.7


class TestDefaults:
    def test_empty_object(self):
        meta = normalize_metadata({})
        assert meta.title.value == "Unknown"
        assert meta.author.value == "Unknown"
        assert meta.document_type.value == "unknown"
        assert meta.summary.value == "No summary available"
        for field in (meta.title, meta.author, meta.document_type, meta.summary):
            assert field.confidence == 0.5

    def test_blank_value_uses_default(self):
        assert normalize_metadata({"Title": "   "}).title.value == "Unknown"

    def test_author_list_joined(self):
        meta = normalize_metadata({"Author": ["Ian Goodfellow", "Yoshua Bengio", ""]})
        assert meta.author.value == "Ian Goodfellow, Yoshua Bengio"

    def test_numeric_value_stringified(self):
        assert normalize_metadata({"Title": 1984}).title.value == "1984"

    def test_end_to_end_from_json_text(self):
        content = json.dumps({"title": {"value": "X"}})
        meta = normalize_response(content)
        assert meta.title.value == "X"
        assert meta.title.confidence == 0.5


class TestCoerceDocumentType:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("book", "book"),
            ("Paper", "paper"),
            (" ARTICLE ", "article"),
            ("unknown", "unknown"),
            ("Research paper", "paper"),
            ("Journal article", "article"),
            ("E-book", "book"),
            ("thesis", "unknown"),
            ("", "unknown"),
            (None, "unknown"),
        ],
    )
    def test_mapping(self, raw, expected):
        assert coerce_document_type(raw) == expected


class TestCoerceConfidence:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (0.75, 0.75),
            (1, 1.0),
            (0, 0.0),
            (85, 0.85),
            (1.5, 0.015),
            ("0.4", 0.4),
            ("90%", 0.9),
            (150, 1.0),
            (-0.3, 0.0),
        ],
    )
    def test_numeric(self, raw, expected):
        assert coerce_confidence(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, True, "high", float("nan"), float("inf"), [0.5]])
    def test_unusable(self, raw):
        assert coerce_confidence(raw) is None
