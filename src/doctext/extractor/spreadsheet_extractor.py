"""Spreadsheet text extraction using pandas (openpyxl / xlrd engines).

Every sheet is read, hidden ones included, in workbook order. Each sheet
becomes tab-delimited rows under a ``--- Sheet: <name> ---`` header; fully
blank rows are dropped and sheets with no text are skipped.
"""

from __future__ import annotations

import io
import logging

import pandas as pd

logger = logging.getLogger(__name__)


def sheet_to_text(frame: pd.DataFrame) -> str:
    """Serialise a headerless sheet frame to tab-delimited rows."""
    frame = frame.dropna(how="all")
    if frame.empty:
        return ""
    frame = frame.fillna("")
    rows = (
        "\t".join(str(value) for value in row)
        for row in frame.itertuples(index=False, name=None)
    )
    return "\n".join(row for row in rows if row.strip())


def extract_spreadsheet_text(content: bytes, file_name: str = "") -> str:
    """Concatenate all sheets of a workbook, each under its own header.

    A sheet that fails to parse is logged and skipped; a workbook that
    cannot be opened at all yields an empty string.
    """
    try:
        workbook = pd.ExcelFile(io.BytesIO(content))
    except Exception as e:
        logger.warning("Error parsing spreadsheet %s: %s", file_name, e)
        return ""

    parts: list[str] = []
    with workbook:
        sheet_names = workbook.sheet_names
        logger.info(
            "Spreadsheet %s loaded: %d sheets", file_name, len(sheet_names)
        )
        for sheet_name in sheet_names:
            try:
                frame = workbook.parse(sheet_name, header=None, dtype=str)
                sheet_text = sheet_to_text(frame)
            except Exception as e:
                logger.warning("Error processing sheet %s: %s", sheet_name, e)
                continue

            if not sheet_text.strip():
                logger.warning("Sheet %s had no extractable data", sheet_name)
                continue

            parts.append(f"\n--- Sheet: {sheet_name} ---\n{sheet_text}\n")
            logger.debug("Sheet %s extracted: %d characters", sheet_name, len(sheet_text))

    text = "".join(parts).strip()
    logger.info(
        "Spreadsheet extraction completed for %s: %d/%d sheets, %d characters",
        file_name,
        len(parts),
        len(sheet_names),
        len(text),
    )
    return text
