"""doctext -- best-effort plain text from uploaded PDFs, Office files and images."""

from doctext.extractor import (
    DocumentKind,
    ExtractionMethod,
    ExtractionReport,
    SourceFile,
    extract_text,
    extract_text_sync,
    extract_with_report,
    is_extractable,
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
