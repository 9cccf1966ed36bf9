"""Primary PDF text-layer extraction using PyMuPDF.

Each page's text spans are requested twice: once with PyMuPDF's default
media-box clipping and once without it, because some producers only place
text (often marked content or artifacts) outside the visible box. Each run
set is joined three ways (see ``text_runs``), giving six candidates per page;
the longest survives and is cleaned.

Also hosts the cheap first-page probe used to short-circuit large scanned
documents straight to OCR.
"""

from __future__ import annotations

import logging

import pymupdf
from tenacity import Retrying, before_sleep_log, stop_after_attempt

from doctext.config.settings import ExtractionSettings
from doctext.extractor.arbitration import assemble, pick_best
from doctext.extractor.cleanup import clean_extracted_text
from doctext.extractor.deadline import Deadline
from doctext.extractor.text_runs import TextRun, run_candidates
from doctext.extractor.types import PageResult, PassOutcome

logger = logging.getLogger(__name__)

# Text only: image blocks are useless here and expensive to materialise
_BASE_FLAGS = pymupdf.TEXTFLAGS_DICT & ~pymupdf.TEXT_PRESERVE_IMAGES

INCLUSION_SETTINGS: dict[str, int] = {
    "clipped": _BASE_FLAGS,
    "unclipped": _BASE_FLAGS & ~pymupdf.TEXT_MEDIABOX_CLIP,
}


def open_pdf(content: bytes) -> pymupdf.Document:
    """Open a PDF from memory. Raises on corrupt or non-PDF input."""
    return pymupdf.open(stream=content, filetype="pdf")


def page_text_runs(page: pymupdf.Page, flags: int) -> list[TextRun]:
    """All text spans on *page* as runs in PDF user space (y up)."""
    height = page.rect.height
    runs: list[TextRun] = []
    page_dict = page.get_text("dict", flags=flags)
    for block in page_dict.get("blocks", []):
        if block.get("type", 0) != 0:
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                x, y = span["origin"]
                runs.append(TextRun(text=span.get("text", ""), x=x, y=height - y))
    return runs


def _read_page_runs(doc: pymupdf.Document, index: int) -> dict[str, list[TextRun]]:
    page = doc.load_page(index)
    return {
        label: page_text_runs(page, flags)
        for label, flags in INCLUSION_SETTINGS.items()
    }


def extract_page_text(
    run_sets: dict[str, list[TextRun]],
    tolerance: float = 5.0,
) -> tuple[str, str]:
    """Pick and clean the best text among all candidates for one page.

    Returns:
        Tuple of (cleaned text, winning strategy label).
    """
    candidates = []
    for label, runs in run_sets.items():
        candidates.extend(run_candidates(runs, label, tolerance))
    best = pick_best(candidates)
    return clean_extracted_text(best.text), best.strategy


def count_first_page_runs(content: bytes) -> int:
    """Number of text spans on page 1; 0 when the probe itself fails.

    A failed probe counts as "no text" so the caller goes to OCR, which does
    its own open and reports its own failure.
    """
    try:
        with open_pdf(content) as doc:
            if doc.needs_pass or doc.page_count == 0:
                return 0
            logger.info("Quick check: PDF has %d pages", doc.page_count)
            count = len(page_text_runs(doc.load_page(0), _BASE_FLAGS))
    except Exception as e:
        logger.warning("Quick PDF check failed: %s", e)
        return 0

    logger.info("Quick check: found %d text runs on first page", count)
    return count


def extract_text_layer(
    content: bytes,
    settings: ExtractionSettings,
    deadline: Deadline,
    file_name: str = "",
) -> PassOutcome:
    """Extract the embedded text layer of every page, in page order.

    A page whose run request raises is retried once (tenacity); a page that
    comes back empty is simply recorded as failed. The document handle is
    closed on every path.

    Args:
        content: Raw PDF bytes.
        settings: Extraction configuration (tolerance, retry attempts).
        deadline: Call budget; the page loop stops when it expires.
        file_name: Used in log messages only.

    Returns:
        PassOutcome with the assembled ``--- Page N ---`` text.
    """
    outcome = PassOutcome()
    retrying = Retrying(
        stop=stop_after_attempt(settings.page_retry_attempts),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )

    try:
        doc = open_pdf(content)
    except Exception as e:
        logger.warning("Cannot open PDF %s: %s", file_name, e)
        outcome.error = f"cannot_open: {e}"
        return outcome

    with doc:
        if doc.needs_pass:
            logger.warning("Encrypted PDF skipped: %s", file_name)
            outcome.error = "encrypted"
            return outcome

        outcome.page_count = doc.page_count
        deadline.allow_pages(doc.page_count)
        logger.info("PDF loaded: %s (%d pages)", file_name, doc.page_count)

        pages: list[PageResult] = []
        for index in range(doc.page_count):
            page_number = index + 1
            if deadline.expired():
                logger.warning(
                    "Deadline reached after %d/%d pages of %s",
                    index,
                    doc.page_count,
                    file_name,
                )
                outcome.timed_out = True
                break

            outcome.pages_attempted += 1
            try:
                run_sets = retrying(_read_page_runs, doc, index)
            except Exception as e:
                logger.error(
                    "Failed to extract text from page %d after %d attempts: %s",
                    page_number,
                    settings.page_retry_attempts,
                    e,
                )
                outcome.failed_pages.append((f"page {page_number}", str(e)))
                continue

            text, strategy = extract_page_text(run_sets, settings.line_tolerance)
            if not text:
                logger.debug("Page %d had no extractable text", page_number)
                outcome.failed_pages.append((f"page {page_number}", "no_text"))
                continue

            pages.append(PageResult(page_number=page_number, text=text))
            outcome.strategies[page_number] = strategy
            logger.debug(
                "Page %d extracted: %d characters (%s)",
                page_number,
                len(text),
                strategy,
            )

    outcome.pages_succeeded = len(pages)
    outcome.text = assemble(pages)

    if outcome.failed_pages:
        logger.warning(
            "No text from %d page(s) of %s: %s",
            len(outcome.failed_pages),
            file_name,
            ", ".join(label for label, _ in outcome.failed_pages),
        )
    logger.info(
        "Text-layer extraction completed for %s: %d/%d pages, %d characters",
        file_name,
        outcome.pages_succeeded,
        outcome.page_count,
        outcome.length,
    )
    return outcome
