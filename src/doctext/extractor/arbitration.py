"""Length-based arbitration between competing extraction candidates.

Every decision point in the pipeline (per page, per OCR pass, per whole
document pass) compares candidates the same way: the trimmed character
length is the only score, and ties go to the candidate computed first.
Longer output is assumed to be more complete; no dictionary or language
model scoring is attempted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from doctext.extractor.types import ExtractionCandidate, PageResult

logger = logging.getLogger(__name__)

_EMPTY = ExtractionCandidate(text="", length=0, strategy="none")


def pick_best(candidates: Iterable[ExtractionCandidate]) -> ExtractionCandidate:
    """Return the first candidate with the greatest trimmed length.

    An empty iterable yields an empty candidate labelled ``"none"``.
    """
    best = _EMPTY
    for candidate in candidates:
        if candidate.length > best.length:
            best = candidate
    return best


def assemble(pages: Iterable[PageResult]) -> str:
    """Join page results in ascending page order, each under its header."""
    ordered = sorted(pages, key=lambda page: page.page_number)
    return "".join(page.render() for page in ordered).strip()


def should_try_alternative(text: str, min_chars: int) -> bool:
    """Primary text-layer output is too thin to trust on its own."""
    return len(text) < min_chars


def should_try_ocr(text: str, min_chars: int) -> bool:
    """Text-layer output is thin enough that the document is likely scanned."""
    return len(text) < min_chars


def prefer_longer(current: str, challenger: str, label: str) -> bool:
    """Whether *challenger* should replace *current* as the document text.

    Whole-document passes are never merged page by page; the longer total
    wins and ties keep the incumbent.
    """
    if len(challenger) > len(current):
        logger.info(
            "%s yielded more text: %d vs %d characters",
            label,
            len(challenger),
            len(current),
        )
        return True
    return False
