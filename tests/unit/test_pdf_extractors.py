"""
PDF Text-Layer Extraction Tests
"""
import pytest

from doctext.extractor import pymupdf_extractor
from doctext.extractor.pdfplumber_extractor import extract_text_layer_alternative
from doctext.extractor.pymupdf_extractor import (
    count_first_page_runs,
    extract_text_layer,
)

MARKERS = ["PAGEONEMARKER", "PAGETWOMARKER", "PAGETHREEMARKER"]


def _positions(text, needles):
    return [text.index(needle) for needle in needles]


class TestPrimaryPass:
    """Test the PyMuPDF text-layer pass"""

    def test_pages_in_order(self, text_pdf, settings, deadline):
        """Should return every page marker in ascending page order"""
        outcome = extract_text_layer(text_pdf, settings, deadline, "report.pdf")

        assert outcome.page_count == 3
        assert outcome.pages_succeeded == 3
        positions = _positions(outcome.text, MARKERS)
        assert positions == sorted(positions)
        assert outcome.text.startswith("--- Page 1 ---\nPAGEONEMARKER opens")
        assert "--- Page 3 ---" in outcome.text

    def test_lines_joined_and_cleaned(self, text_pdf, settings, deadline):
        """Should join a page's lines into one cleaned line"""
        outcome = extract_text_layer(text_pdf, settings, deadline)
        assert "PAGETWOMARKER lists every finding from the walkthrough in order of severity." in outcome.text

    def test_blank_pages_recorded_as_failed(self, blank_pdf, settings, deadline):
        """Should omit pages without text and record them"""
        outcome = extract_text_layer(blank_pdf, settings, deadline)

        assert outcome.text == ""
        assert outcome.pages_attempted == 2
        assert outcome.failed_pages == [("page 1", "no_text"), ("page 2", "no_text")]

    def test_mixed_pages(self, pdf_factory, settings, deadline):
        """Should skip the empty page without a placeholder"""
        data = pdf_factory(["First page text", "", "Third page text"])
        outcome = extract_text_layer(data, settings, deadline)

        assert outcome.text == (
            "--- Page 1 ---\nFirst page text\n\n--- Page 3 ---\nThird page text"
        )

    @pytest.mark.parametrize("content", [b"", b"not a pdf at all"])
    def test_unreadable_document(self, content, settings, deadline):
        """Should report an open failure instead of raising"""
        outcome = extract_text_layer(content, settings, deadline)
        assert outcome.text == ""
        assert outcome.error is not None

    def test_page_error_retried_once(self, text_pdf, settings, deadline, monkeypatch):
        """Should retry a failing page once and then move on"""
        calls = []
        original = pymupdf_extractor._read_page_runs

        def flaky(doc, index):
            calls.append(index)
            if index == 1:
                raise RuntimeError("content stream damaged")
            return original(doc, index)

        monkeypatch.setattr(pymupdf_extractor, "_read_page_runs", flaky)
        outcome = extract_text_layer(text_pdf, settings, deadline)

        assert calls.count(1) == 2
        assert calls.count(0) == 1
        assert "PAGETWOMARKER" not in outcome.text
        assert "PAGEONEMARKER" in outcome.text and "PAGETHREEMARKER" in outcome.text
        assert outcome.failed_pages == [("page 2", "content stream damaged")]

    def test_transient_error_recovers(self, text_pdf, settings, deadline, monkeypatch):
        """Should keep the page when the retry succeeds"""
        failed = []
        original = pymupdf_extractor._read_page_runs

        def flaky_once(doc, index):
            if index == 0 and not failed:
                failed.append(index)
                raise RuntimeError("transient")
            return original(doc, index)

        monkeypatch.setattr(pymupdf_extractor, "_read_page_runs", flaky_once)
        outcome = extract_text_layer(text_pdf, settings, deadline)

        assert outcome.pages_succeeded == 3
        assert "PAGEONEMARKER" in outcome.text

    def test_deadline_stops_page_loop(self, text_pdf, settings, expired_deadline):
        """Should stop before the first page once the budget is spent"""
        outcome = extract_text_layer(text_pdf, settings, expired_deadline)
        assert outcome.timed_out is True
        assert outcome.pages_attempted == 0
        assert outcome.text == ""

    def test_idempotent(self, text_pdf, settings, deadline):
        first = extract_text_layer(text_pdf, settings, deadline)
        second = extract_text_layer(text_pdf, settings, deadline)
        assert first.text == second.text


class TestQuickCheck:
    """Test the first-page text run probe"""

    def test_counts_runs(self, text_pdf):
        assert count_first_page_runs(text_pdf) >= 2

    def test_scanned_page(self, blank_pdf):
        assert count_first_page_runs(blank_pdf) == 0

    def test_unreadable(self):
        """Should count an unreadable file as having no text"""
        assert count_first_page_runs(b"garbage") == 0


class TestAlternativePass:
    """Test the pdfplumber text-layer pass"""

    def test_pages_in_order(self, text_pdf, settings, deadline):
        outcome = extract_text_layer_alternative(text_pdf, settings, deadline)

        assert outcome.pages_succeeded == 3
        positions = _positions(outcome.text, MARKERS)
        assert positions == sorted(positions)
        assert outcome.text.startswith("--- Page 1 ---\n")

    def test_blank_document(self, blank_pdf, settings, deadline):
        outcome = extract_text_layer_alternative(blank_pdf, settings, deadline)
        assert outcome.text == ""
        assert outcome.pages_succeeded == 0

    def test_unreadable_document(self, settings, deadline):
        """Should report an open failure instead of raising"""
        outcome = extract_text_layer_alternative(b"garbage", settings, deadline)
        assert outcome.text == ""
        assert outcome.error is not None

    def test_deadline(self, text_pdf, settings, expired_deadline):
        outcome = extract_text_layer_alternative(text_pdf, settings, expired_deadline)
        assert outcome.timed_out is True
        assert outcome.text == ""
