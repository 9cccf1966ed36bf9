"""Raw text extraction from Word documents using python-docx.

Body content is read in document order: paragraphs and tables interleave
exactly as they do on the page. Single pass, no retries. Legacy binary
``.doc`` files are not OOXML containers, so python-docx rejects them and the
result is empty.
"""

from __future__ import annotations

import io
import logging

import docx
from docx.table import Table

logger = logging.getLogger(__name__)


def _table_lines(table: Table) -> list[str]:
    """One tab-joined line per table row with text."""
    lines: list[str] = []
    for row in table.rows:
        cells: list[str] = []
        for cell in row.cells:
            value = cell.text.strip()
            # Horizontally merged cells repeat across the row
            if value and (not cells or cells[-1] != value):
                cells.append(value)
        if cells:
            lines.append("\t".join(cells))
    return lines


def extract_word_text(content: bytes, file_name: str = "") -> str:
    """Return body paragraphs and table rows in document order, one per line.

    Any parse failure (corrupt zip, legacy format, missing parts) is logged
    and yields an empty string.
    """
    try:
        document = docx.Document(io.BytesIO(content))
    except Exception as e:
        logger.warning("Error parsing Word document %s: %s", file_name, e)
        return ""

    lines: list[str] = []
    paragraphs = tables = 0
    for block in document.iter_inner_content():
        if isinstance(block, Table):
            tables += 1
            lines.extend(_table_lines(block))
        else:
            paragraphs += 1
            if block.text.strip():
                lines.append(block.text)

    if not lines:
        logger.info("Word document %s has no text content", file_name)
    else:
        logger.debug(
            "Word document %s: %d paragraphs, %d tables",
            file_name,
            paragraphs,
            tables,
        )

    text = "\n".join(lines)
    logger.info("Word extraction completed for %s: %d characters", file_name, len(text))
    return text
