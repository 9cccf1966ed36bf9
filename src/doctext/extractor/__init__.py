"""Text extraction core: uploaded file bytes in, best-effort plain text out.

Public API:
    extract_text(source, settings=None)          -> str   (async)
    extract_with_report(source, settings=None)   -> ExtractionReport (async)
    extract_text_sync(source, settings=None)     -> str
    is_extractable(source)                       -> bool
"""

from doctext.extractor.service import (
    extract_text,
    extract_text_sync,
    extract_with_report,
    is_extractable,
)
from doctext.extractor.types import (
    DocumentKind,
    ExtractionMethod,
    ExtractionReport,
    SourceFile,
)

__all__ = [
    "DocumentKind",
    "ExtractionMethod",
    "ExtractionReport",
    "SourceFile",
    "extract_text",
    "extract_text_sync",
    "extract_with_report",
    "is_extractable",
]
