"""Rendering + OCR fallback for scanned PDFs and raster images.

PDF pages are rendered with PyMuPDF at 3x nominal resolution, encoded to
PNG, and recognised with Tesseract (via pytesseract) four times with
different page-segmentation assumptions. The longest trimmed output wins
and goes through OCR cleanup.

Standalone images get a single default pass. Scanned PDFs are the failure
mode the multi-pass design targets; uploaded photos are not.

Everything here is sequential: one page rendered at a time, one tesseract
process at a time. A 3x render of an A4 page is ~25 MB of RGB, so parallel
rendering of a large scan would multiply peak memory.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass

import pymupdf
import pytesseract
from PIL import Image

from doctext.config.settings import ExtractionSettings
from doctext.extractor.arbitration import assemble, pick_best
from doctext.extractor.cleanup import clean_ocr_text
from doctext.extractor.deadline import Deadline
from doctext.extractor.pymupdf_extractor import open_pdf
from doctext.extractor.types import ExtractionCandidate, OcrPassResult, PageResult, PassOutcome

logger = logging.getLogger(__name__)

# Tesseract --oem 1: LSTM recogniser only, never the legacy engine
LSTM_ONLY = 1

# pytesseract treats timeout=0 as "no timeout"
_MIN_TIMEOUT_SECONDS = 1.0


@dataclass(frozen=True)
class OcrPass:
    label: str
    segmentation_mode: int
    use_whitelist: bool = False


OCR_PASSES: tuple[OcrPass, ...] = (
    OcrPass("auto_osd", 1),  # automatic segmentation with orientation detection
    OcrPass("single_block", 6),  # one uniform block of text
    OcrPass("single_line", 7),  # one text line
    OcrPass("auto_whitelist", 1, use_whitelist=True),
)


def _configure_tesseract(settings: ExtractionSettings) -> None:
    if settings.tesseract_cmd != "tesseract":
        pytesseract.pytesseract.tesseract_cmd = settings.tesseract_cmd


def tesseract_config(ocr_pass: OcrPass, whitelist: str) -> str:
    """Command-line flags for one pass."""
    config = (
        f"--oem {LSTM_ONLY} --psm {ocr_pass.segmentation_mode}"
        " -c preserve_interword_spaces=1"
    )
    if ocr_pass.use_whitelist:
        config += f" -c tessedit_char_whitelist={whitelist}"
    return config


def render_page_png(page: pymupdf.Page, zoom: float) -> bytes:
    """Rasterise *page* at *zoom* times its nominal resolution, as PNG."""
    pix = page.get_pixmap(matrix=pymupdf.Matrix(zoom, zoom), alpha=False)
    try:
        return pix.tobytes("png")
    finally:
        del pix


def run_ocr_pass(
    image: Image.Image,
    ocr_pass: OcrPass,
    settings: ExtractionSettings,
    deadline: Deadline,
) -> OcrPassResult:
    """Run one tesseract pass; a failure scores zero instead of raising."""
    try:
        text = pytesseract.image_to_string(
            image,
            lang=settings.ocr_language,
            config=tesseract_config(ocr_pass, settings.ocr_char_whitelist),
            timeout=max(deadline.remaining(), _MIN_TIMEOUT_SECONDS),
        )
    except Exception as e:
        return OcrPassResult(
            text="",
            engine_mode=LSTM_ONLY,
            segmentation_mode=ocr_pass.segmentation_mode,
            label=ocr_pass.label,
            error=str(e),
        )
    return OcrPassResult(
        text=text,
        engine_mode=LSTM_ONLY,
        segmentation_mode=ocr_pass.segmentation_mode,
        label=ocr_pass.label,
        score=len(text.strip()),
    )


def ocr_page_image(
    image: Image.Image,
    settings: ExtractionSettings,
    deadline: Deadline,
    page_number: int,
) -> tuple[str, str, list[OcrPassResult]]:
    """Multi-pass OCR of one rendered page.

    Returns:
        Tuple of (cleaned text of the best pass, its label, every pass
        result). The text is empty when every pass failed or read nothing.
    """
    results: list[OcrPassResult] = []
    for ocr_pass in OCR_PASSES:
        if deadline.expired():
            logger.warning(
                "Deadline reached before OCR pass %s on page %d",
                ocr_pass.label,
                page_number,
            )
            break
        result = run_ocr_pass(image, ocr_pass, settings, deadline)
        if result.error:
            logger.warning(
                "OCR pass %s failed for page %d: %s",
                ocr_pass.label,
                page_number,
                result.error,
            )
        else:
            logger.debug(
                "OCR page %d pass %s: %d characters",
                page_number,
                ocr_pass.label,
                result.score,
            )
        results.append(result)

    best = pick_best(
        ExtractionCandidate(text=r.text, length=r.score, strategy=r.label)
        for r in results
    )
    text = clean_ocr_text(best.text, fix_confusions=settings.ocr_fix_confusions)
    if text:
        logger.info(
            "Best OCR result for page %d: %d characters (%s)",
            page_number,
            len(text),
            best.strategy,
        )
    return text, best.strategy, results


def ocr_pdf(
    content: bytes,
    settings: ExtractionSettings,
    deadline: Deadline,
    file_name: str = "",
) -> PassOutcome:
    """Render every page of a PDF and OCR it, in page order.

    Args:
        content: Raw PDF bytes.
        settings: Extraction configuration (zoom, language, whitelist).
        deadline: Call budget; checked before each page and each pass.
        file_name: Used in log messages only.

    Returns:
        PassOutcome with ``--- Page N (OCR) ---`` delimited text.
    """
    outcome = PassOutcome()
    _configure_tesseract(settings)

    try:
        doc = open_pdf(content)
    except Exception as e:
        logger.warning("Cannot open PDF for OCR %s: %s", file_name, e)
        outcome.error = f"cannot_open: {e}"
        return outcome

    pages: list[PageResult] = []
    with doc:
        if doc.needs_pass:
            logger.warning("Encrypted PDF skipped for OCR: %s", file_name)
            outcome.error = "encrypted"
            return outcome

        outcome.page_count = doc.page_count
        deadline.allow_pages(doc.page_count)
        logger.info(
            "Starting OCR processing for %s (%d pages)", file_name, doc.page_count
        )

        for index in range(doc.page_count):
            page_number = index + 1
            if deadline.expired():
                logger.warning(
                    "Deadline reached after OCR of %d/%d pages of %s",
                    index,
                    doc.page_count,
                    file_name,
                )
                outcome.timed_out = True
                break

            outcome.pages_attempted += 1
            try:
                png = render_page_png(doc.load_page(index), settings.render_zoom)
                with Image.open(io.BytesIO(png)) as image:
                    image.load()
                    text, strategy, results = ocr_page_image(
                        image, settings, deadline, page_number
                    )
                del png
            except Exception as e:
                logger.warning("OCR failed for page %d: %s", page_number, e)
                outcome.failed_pages.append((f"page {page_number}", str(e)))
                continue

            outcome.failed_passes.extend(
                (f"page {page_number} {r.label}", r.error) for r in results if r.error
            )
            if text:
                pages.append(PageResult(page_number=page_number, text=text, ocr=True))
                outcome.strategies[page_number] = strategy
            else:
                logger.warning("All OCR passes failed for page %d", page_number)
                outcome.failed_pages.append((f"page {page_number}", "no_text"))

    outcome.pages_succeeded = len(pages)
    outcome.text = assemble(pages)
    logger.info(
        "OCR extraction completed for %s: %d/%d pages, %d characters",
        file_name,
        outcome.pages_succeeded,
        outcome.page_count,
        outcome.length,
    )
    return outcome


def ocr_image(
    content: bytes,
    settings: ExtractionSettings,
    deadline: Deadline,
    file_name: str = "",
) -> str:
    """Single default-segmentation OCR pass over an uploaded image."""
    _configure_tesseract(settings)
    try:
        with Image.open(io.BytesIO(content)) as image:
            image.load()
            text = pytesseract.image_to_string(
                image,
                lang=settings.ocr_language,
                timeout=max(deadline.remaining(), _MIN_TIMEOUT_SECONDS),
            )
    except Exception as e:
        logger.warning("Error performing OCR on image %s: %s", file_name, e)
        return ""

    text = text.strip()
    logger.info("Image OCR extracted %d characters from %s", len(text), file_name)
    return text
