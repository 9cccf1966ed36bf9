"""Text normalisation applied before a candidate is accepted.

Two transforms:

- ``clean_extracted_text``: spacing repairs for text-layer output, where
  producers often emit words without separating spaces.
- ``clean_ocr_text``: the same repairs plus tesseract character-confusion
  fixes (``|`` -> ``I``, ``0`` -> ``O``, ``1`` -> ``l``).

The confusion fixes are lossy: every zero and one is rewritten, so real
numbers (dates, totals, serial numbers) come out as letters. Word splitting
runs first, which means ``0FFICE`` is split at the digit before the zero is
read as ``O``. Callers that index numeric content can switch the fixes off.
"""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_EXCESS_NEWLINES = re.compile(r"\n\s*\n\s*\n")

# Boundary heuristics for concatenated words
_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_SENTENCE_UPPER = re.compile(r"([.!?])([A-Z])")
_LOWER_DIGIT = re.compile(r"([a-z])(\d)")
_DIGIT_UPPER = re.compile(r"(\d)([A-Z])")

_CONFUSIONS = str.maketrans({"|": "I", "0": "O", "1": "l"})


def _split_glued_words(text: str) -> str:
    text = _LOWER_UPPER.sub(r"\1 \2", text)
    text = _SENTENCE_UPPER.sub(r"\1 \2", text)
    text = _LOWER_DIGIT.sub(r"\1 \2", text)
    return _DIGIT_UPPER.sub(r"\1 \2", text)


def _normalise_whitespace(text: str) -> str:
    text = _WHITESPACE.sub(" ", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def _fix_confusions(text: str) -> str:
    return text.translate(_CONFUSIONS)


def clean_extracted_text(text: str) -> str:
    """Normalise text-layer output for indexing."""
    if not text:
        return ""
    text = _WHITESPACE.sub(" ", text)
    text = _split_glued_words(text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def clean_ocr_text(text: str, fix_confusions: bool = True) -> str:
    """Normalise tesseract output, optionally repairing confused glyphs.

    Args:
        text: Raw recognizer output.
        fix_confusions: Apply the ``|``/``0``/``1`` substitutions.

    Returns:
        Cleaned single-line text, trimmed.
    """
    if not text:
        return ""
    text = _split_glued_words(text)
    if fix_confusions:
        text = _fix_confusions(text)
    return _normalise_whitespace(text)
