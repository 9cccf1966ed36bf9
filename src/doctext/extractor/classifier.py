"""Route an uploaded file to an extraction strategy.

The declared media type is trusted first; browsers and upload clients often
mis-report it (``application/octet-stream`` for everything), so a failed
media-type match falls back to the file-name suffix.
"""

from __future__ import annotations

from pathlib import PurePath

from doctext.extractor.types import DocumentKind, SourceFile

_MEDIA_TYPES: dict[DocumentKind, frozenset[str]] = {
    DocumentKind.PDF: frozenset({"application/pdf"}),
    DocumentKind.WORD: frozenset({
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
    }),
    DocumentKind.SPREADSHEET: frozenset({
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
    }),
    DocumentKind.IMAGE: frozenset({"image/png", "image/jpeg", "image/jpg"}),
}

_SUFFIXES: dict[DocumentKind, frozenset[str]] = {
    DocumentKind.PDF: frozenset({".pdf"}),
    DocumentKind.WORD: frozenset({".docx", ".doc"}),
    DocumentKind.SPREADSHEET: frozenset({".xlsx", ".xls"}),
    DocumentKind.IMAGE: frozenset({".png", ".jpg", ".jpeg"}),
}


def _normalise_media_type(media_type: str) -> str:
    # "application/pdf; charset=binary" -> "application/pdf"
    return media_type.split(";", 1)[0].strip().lower()


def classify(source: SourceFile) -> DocumentKind:
    """Return the extraction route for *source*.

    Media type is checked against every category before the suffix is
    consulted, so a correctly declared type always wins over a misleading
    file name.
    """
    media_type = _normalise_media_type(source.media_type or "")
    for kind, media_types in _MEDIA_TYPES.items():
        if media_type in media_types:
            return kind

    suffix = PurePath(source.file_name or "").suffix.lower()
    for kind, suffixes in _SUFFIXES.items():
        if suffix in suffixes:
            return kind

    return DocumentKind.UNSUPPORTED


def is_extractable(source: SourceFile) -> bool:
    """Whether extract_text() would attempt anything for *source*."""
    return classify(source) is not DocumentKind.UNSUPPORTED
