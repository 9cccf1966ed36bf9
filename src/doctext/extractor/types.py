"""Shared types for the extraction pipeline.

Defines the immutable input (SourceFile), the per-unit candidates and page
results compared during arbitration, and the ExtractionReport diagnostics
object returned alongside the plain text.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class DocumentKind(Enum):
    """Extraction route chosen by the classifier."""

    PDF = "pdf"
    WORD = "word"
    SPREADSHEET = "spreadsheet"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


class ExtractionMethod(Enum):
    """Method that produced the final text of a document."""

    TEXT_LAYER = "text_layer"
    TEXT_LAYER_ALTERNATIVE = "text_layer_alternative"
    OCR = "ocr"
    IMAGE_OCR = "image_ocr"
    WORD = "word"
    SPREADSHEET = "spreadsheet"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


class SourceFile(BaseModel):
    """An uploaded file: raw bytes plus the name and type the client declared."""

    model_config = ConfigDict(frozen=True)

    content: bytes
    media_type: str = ""
    file_name: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str | Path, media_type: str | None = None) -> SourceFile:
        """Read *path* from disk, guessing the media type from its suffix."""
        path = Path(path)
        if media_type is None:
            media_type = mimetypes.guess_type(path.name)[0] or ""
        return cls(
            content=path.read_bytes(),
            media_type=media_type,
            file_name=path.name,
        )


@dataclass(frozen=True)
class ExtractionCandidate:
    """Output of one extraction strategy for one page, sheet or document."""

    text: str
    length: int
    strategy: str

    @classmethod
    def of(cls, text: str, strategy: str) -> ExtractionCandidate:
        return cls(text=text, length=len(text.strip()), strategy=strategy)


@dataclass(frozen=True)
class PageResult:
    """Winning text for one physical page (1-based page_number)."""

    page_number: int
    text: str
    ocr: bool = False

    @property
    def header(self) -> str:
        if self.ocr:
            return f"--- Page {self.page_number} (OCR) ---"
        return f"--- Page {self.page_number} ---"

    def render(self) -> str:
        return f"\n{self.header}\n{self.text}\n"


@dataclass(frozen=True)
class OcrPassResult:
    """One tesseract run over one bitmap. Failed passes carry score 0."""

    text: str
    engine_mode: int
    segmentation_mode: int
    label: str
    score: int = 0
    error: str | None = None


@dataclass
class PassOutcome:
    """Assembled text of one whole-document pass plus per-page bookkeeping.

    Attributes:
        text: Page texts with delimiters, trimmed.
        page_count: Pages in the document (0 if it could not be opened).
        pages_attempted: Pages actually processed before any deadline hit.
        pages_succeeded: Pages that contributed text.
        failed_pages: (page label, reason) for every page that did not.
        timed_out: Whether the deadline stopped the page loop early.
        error: Document-level failure (cannot open, encrypted, ...).
        strategies: Winning join or OCR pass label per page number.
        failed_passes: (page + pass label, error) for every OCR pass that raised.
    """

    text: str = ""
    page_count: int = 0
    pages_attempted: int = 0
    pages_succeeded: int = 0
    failed_pages: list[tuple[str, str]] = field(default_factory=list)
    timed_out: bool = False
    error: str | None = None
    strategies: dict[int, str] = field(default_factory=dict)
    failed_passes: list[tuple[str, str]] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass
class ExtractionReport:
    """Diagnostics for one extraction call, parallel to the plain text.

    The text is the only thing callers strictly need; the remaining fields
    let a calling layer tell "nothing in the document" apart from "every
    page failed" or "ran out of time".
    """

    text: str = ""
    kind: DocumentKind = DocumentKind.UNSUPPORTED
    method: ExtractionMethod = ExtractionMethod.FAILED
    units_attempted: int = 0
    units_succeeded: int = 0
    failed_units: list[tuple[str, str]] = field(default_factory=list)
    timed_out: bool = False
    scanned_shortcut: bool = False
    elapsed_seconds: float = 0.0
    page_strategies: dict[int, str] = field(default_factory=dict)
    failed_passes: list[tuple[str, str]] = field(default_factory=list)

    @property
    def char_count(self) -> int:
        return len(self.text)

    def absorb(self, outcome: PassOutcome, method: ExtractionMethod) -> None:
        """Adopt *outcome* as the document's current best result."""
        self.text = outcome.text
        self.method = method if outcome.text else ExtractionMethod.FAILED
        self.units_attempted = outcome.pages_attempted
        self.units_succeeded = outcome.pages_succeeded
        self.failed_units = list(outcome.failed_pages)
        if outcome.error:
            self.failed_units.append(("document", outcome.error))
        self.page_strategies = dict(outcome.strategies)
        self.failed_passes = list(outcome.failed_passes)
        self.timed_out = self.timed_out or outcome.timed_out

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "method": self.method.value,
            "char_count": self.char_count,
            "units_attempted": self.units_attempted,
            "units_succeeded": self.units_succeeded,
            "failed_units": [list(unit) for unit in self.failed_units],
            "timed_out": self.timed_out,
            "scanned_shortcut": self.scanned_shortcut,
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "page_strategies": {str(page): label for page, label in self.page_strategies.items()},
            "failed_passes": [list(item) for item in self.failed_passes],
        }
