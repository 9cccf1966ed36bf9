"""
Test configuration and fixtures.

Documents are generated on the fly (PyMuPDF, openpyxl, python-docx) so the
suite needs no binary fixtures. Tesseract is never invoked: OCR tests swap
``pytesseract.image_to_string`` for a fake.
"""
import io

import docx
import openpyxl
import pymupdf
import pytest
import pytesseract
from PIL import Image

from doctext.config.settings import ExtractionSettings
from doctext.extractor.deadline import Deadline


def make_pdf(pages):
    """Build a PDF with one page per entry; an entry may be a str or a list of lines."""
    doc = pymupdf.open()
    for content in pages:
        page = doc.new_page()
        lines = [content] if isinstance(content, str) else content
        for i, line in enumerate(lines):
            if line:
                page.insert_text((72, 72 + 14 * i), line, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_factory():
    """Callable building a PDF from page contents"""
    return make_pdf


@pytest.fixture
def settings():
    """Default settings with a generous deadline"""
    return ExtractionSettings(
        deadline_base_seconds=120,
        deadline_per_page_seconds=30,
        deadline_max_seconds=600,
    )


@pytest.fixture
def deadline(settings):
    return Deadline.from_settings(settings)


@pytest.fixture
def expired_deadline():
    return Deadline(0, 0, 0)


@pytest.fixture
def text_pdf():
    """Three-page digitally authored PDF with one distinct marker per page"""
    return make_pdf([
        ["PAGEONEMARKER opens the quarterly inspection report", "for the north site."],
        ["PAGETWOMARKER lists every finding from the walkthrough", "in order of severity."],
        ["PAGETHREEMARKER closes with the sign-off section", "and the distribution list."],
    ])


@pytest.fixture
def blank_pdf():
    """Two pages with no text layer at all, like a scan without OCR"""
    return make_pdf(["", ""])


@pytest.fixture
def workbook_bytes():
    """Workbook with a visible sheet and a hidden sheet"""
    wb = openpyxl.Workbook()
    visible = wb.active
    visible.title = "Visible"
    visible["A1"] = "ALPHA"
    visible["A3"] = "gamma"
    hidden = wb.create_sheet("Secret")
    hidden["A1"] = "BETA"
    hidden.sheet_state = "hidden"
    wb.create_sheet("Empty")
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def docx_bytes():
    """Word document with two paragraphs and a small table"""
    document = docx.Document()
    document.add_paragraph("Minutes of the safety committee")
    document.add_paragraph("")
    document.add_paragraph("Attendees confirmed the revised schedule.")
    table = document.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "Owner"
    table.cell(0, 1).text = "Facilities"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    image = Image.new("RGB", (200, 80), "white")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class FakeTesseract:
    """Stand-in for pytesseract.image_to_string keyed by --psm value.

    ``outputs`` maps a psm (int) to a string or an exception instance;
    ``default`` is used for calls without a psm (single image pass).
    """

    def __init__(self, outputs=None, default=""):
        self.outputs = outputs or {}
        self.default = default
        self.calls = []

    def __call__(self, image, lang=None, config="", timeout=0, **kwargs):
        self.calls.append({"lang": lang, "config": config, "timeout": timeout})
        psm = None
        parts = config.split()
        if "--psm" in parts:
            psm = int(parts[parts.index("--psm") + 1])
        if psm is not None and "tessedit_char_whitelist" in config:
            psm = "whitelist"
        result = self.outputs.get(psm, self.default)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_tesseract(monkeypatch):
    """Install a FakeTesseract and return it for configuration"""
    fake = FakeTesseract()
    monkeypatch.setattr(pytesseract, "image_to_string", fake)
    return fake
