"""Alternative PDF text-layer extraction using pdfplumber.

Second opinion for documents whose PyMuPDF pass came back nearly empty.
pdfplumber (pdfminer underneath) decodes fonts and content streams
independently of MuPDF, which rescues some PDFs with odd encodings. Word
runs are joined with no separator, with single spaces, and in position order
with a wider line band than the primary pass. No per-page retries here.
"""

from __future__ import annotations

import io
import logging

import pdfplumber

from doctext.config.settings import ExtractionSettings
from doctext.extractor.arbitration import assemble, pick_best
from doctext.extractor.cleanup import clean_extracted_text
from doctext.extractor.deadline import Deadline
from doctext.extractor.text_runs import TextRun, position_sorted_join, raw_join
from doctext.extractor.types import ExtractionCandidate, PageResult, PassOutcome

logger = logging.getLogger(__name__)


def _word_runs(page) -> list[TextRun]:
    words = page.extract_words(keep_blank_chars=True, use_text_flow=True)
    # pdfplumber's "top" is measured from the top edge; flip to y-up
    return [
        TextRun(text=word["text"], x=word["x0"], y=page.height - word["top"])
        for word in words
    ]


def alternative_candidates(runs: list[TextRun], tolerance: float) -> list[ExtractionCandidate]:
    return [
        ExtractionCandidate.of(raw_join(runs, separator=""), "pdfplumber:original"),
        ExtractionCandidate.of(raw_join(runs), "pdfplumber:spaced"),
        ExtractionCandidate.of(position_sorted_join(runs, tolerance), "pdfplumber:position"),
    ]


def extract_text_layer_alternative(
    content: bytes,
    settings: ExtractionSettings,
    deadline: Deadline,
    file_name: str = "",
) -> PassOutcome:
    """Re-extract every page's text layer with pdfplumber.

    Args:
        content: Raw PDF bytes.
        settings: Extraction configuration (alternative line tolerance).
        deadline: Call budget; the page loop stops when it expires.
        file_name: Used in log messages only.

    Returns:
        PassOutcome with the assembled ``--- Page N ---`` text, or with
        ``error`` set when the document cannot be opened.
    """
    outcome = PassOutcome()
    pages: list[PageResult] = []

    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            outcome.page_count = len(pdf.pages)
            deadline.allow_pages(outcome.page_count)
            logger.info(
                "Alternative PDF loaded: %s (%d pages)", file_name, outcome.page_count
            )

            for page_number, page in enumerate(pdf.pages, start=1):
                if deadline.expired():
                    logger.warning(
                        "Deadline reached during alternative pass of %s at page %d",
                        file_name,
                        page_number,
                    )
                    outcome.timed_out = True
                    break

                outcome.pages_attempted += 1
                try:
                    runs = _word_runs(page)
                    best = pick_best(
                        alternative_candidates(runs, settings.alternative_line_tolerance)
                    )
                    text = clean_extracted_text(best.text)
                    strategy = best.strategy
                except Exception as e:
                    logger.warning(
                        "Alternative extraction failed for page %d: %s", page_number, e
                    )
                    outcome.failed_pages.append((f"page {page_number}", str(e)))
                    continue
                finally:
                    # Drop pdfminer's cached layout objects for this page
                    page.close()

                if text:
                    pages.append(PageResult(page_number=page_number, text=text))
                    outcome.strategies[page_number] = strategy
                else:
                    outcome.failed_pages.append((f"page {page_number}", "no_text"))

    except Exception as e:
        logger.warning("Error in alternative PDF extraction for %s: %s", file_name, e)
        outcome.error = f"cannot_open: {e}"

    outcome.pages_succeeded = len(pages)
    outcome.text = assemble(pages)
    logger.info(
        "Alternative PDF extraction completed for %s: %d/%d pages, %d characters",
        file_name,
        outcome.pages_succeeded,
        outcome.page_count,
        outcome.length,
    )
    return outcome
