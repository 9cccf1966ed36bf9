"""Per-file text extraction service with tiered fallback.

Routes an uploaded file by kind and, for PDFs, orchestrates the tiers:

1. **Quick check** -- files over 10 MiB whose first page has no text runs
   are treated as scanned and sent straight to OCR.
2. **PyMuPDF text layer** -- six candidates per page, longest wins.
3. **pdfplumber text layer** -- when tier 2 yields under 100 characters;
   replaces tier 2 only if longer overall.
4. **Tesseract OCR** -- when the best text layer is under 50 characters;
   replaces it only if longer overall.

Word files, spreadsheets and images each get a single extractor.

Contract: the entry points never raise. Every failure becomes a log record
and a shorter (possibly empty) result. Callers needing more than the string
use ``extract_with_report`` for the parallel diagnostics.

Blocking library work runs on a worker thread, one stage at a time, so a
call holds at most one document handle and one rendered page at once while
the event loop stays free for other calls. Stage threads are daemons that
nobody joins: when the hard ceiling fires, the caller gets its empty result
straight away (sync callers and the CLI included) and the abandoned stage
finishes in the background, its result discarded.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from doctext.config.settings import ExtractionSettings
from doctext.extractor.arbitration import prefer_longer, should_try_alternative, should_try_ocr
from doctext.extractor.classifier import classify, is_extractable
from doctext.extractor.deadline import Deadline
from doctext.extractor.ocr import ocr_image, ocr_pdf
from doctext.extractor.pdfplumber_extractor import extract_text_layer_alternative
from doctext.extractor.pymupdf_extractor import count_first_page_runs, extract_text_layer
from doctext.extractor.spreadsheet_extractor import extract_spreadsheet_text
from doctext.extractor.types import (
    DocumentKind,
    ExtractionMethod,
    ExtractionReport,
    SourceFile,
)
from doctext.extractor.word_extractor import extract_word_text

logger = logging.getLogger(__name__)

__all__ = [
    "extract_text",
    "extract_text_sync",
    "extract_with_report",
    "is_extractable",
]


def _settle(future: asyncio.Future, result, error: BaseException | None) -> None:
    # Already cancelled when the hard ceiling fired first
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


async def _run_blocking(func, *args):
    """Run *func* on a fresh daemon thread and await its result.

    Unlike ``asyncio.to_thread`` the thread is not part of an executor, so
    neither ``asyncio.run`` nor interpreter shutdown waits for a stage that
    outlived the call's deadline.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def worker() -> None:
        try:
            result, error = func(*args), None
        except Exception as e:
            result, error = None, e
        try:
            loop.call_soon_threadsafe(_settle, future, result, error)
        except RuntimeError:
            logger.debug(
                "Discarding result of %s: event loop already closed",
                getattr(func, "__name__", func),
            )

    threading.Thread(target=worker, name="doctext-stage", daemon=True).start()
    return await future


async def _extract_pdf(
    source: SourceFile,
    settings: ExtractionSettings,
    deadline: Deadline,
    report: ExtractionReport,
) -> None:
    name = source.file_name
    logger.info(
        "Starting PDF text extraction for %s (%.2f MB)",
        name,
        source.size / 1024 / 1024,
    )

    # --- Tier 1: scanned-document quick check (large files only) ---

    if source.size > settings.large_file_threshold_bytes:
        logger.info("Large PDF detected, checking if %s is a scanned document", name)
        run_count = await _run_blocking(count_first_page_runs, source.content)
        if run_count == 0:
            logger.info("Quick check suggests %s is scanned, going straight to OCR", name)
            report.scanned_shortcut = True
            outcome = await _run_blocking(ocr_pdf, source.content, settings, deadline, name)
            report.absorb(outcome, ExtractionMethod.OCR)
            return
        logger.info("Quick check found text, proceeding with normal extraction")

    # --- Tier 2: PyMuPDF text layer ---

    outcome = await _run_blocking(
        extract_text_layer, source.content, settings, deadline, name
    )
    report.absorb(outcome, ExtractionMethod.TEXT_LAYER)

    # --- Tier 3: pdfplumber text layer ---

    if should_try_alternative(report.text, settings.alternative_pass_min_chars):
        if deadline.expired():
            logger.warning("Deadline reached, skipping alternative pass for %s", name)
            report.timed_out = True
            return
        logger.info(
            "Primary extraction of %s yielded %d characters, trying alternative method",
            name,
            len(report.text),
        )
        outcome = await _run_blocking(
            extract_text_layer_alternative, source.content, settings, deadline, name
        )
        if prefer_longer(report.text, outcome.text, "Alternative method"):
            report.absorb(outcome, ExtractionMethod.TEXT_LAYER_ALTERNATIVE)

    # --- Tier 4: Tesseract OCR ---

    if should_try_ocr(report.text, settings.ocr_min_chars):
        if deadline.expired():
            logger.warning("Deadline reached, skipping OCR for %s", name)
            report.timed_out = True
            return
        logger.info("Text extraction failed for %s, attempting OCR fallback", name)
        outcome = await _run_blocking(ocr_pdf, source.content, settings, deadline, name)
        if prefer_longer(report.text, outcome.text, "OCR method"):
            report.absorb(outcome, ExtractionMethod.OCR)
        else:
            report.failed_passes.extend(outcome.failed_passes)
            logger.warning(
                "OCR also failed to extract text from %s; likely a very low-quality "
                "scan or non-text content",
                name,
            )


async def _extract_single(
    source: SourceFile,
    report: ExtractionReport,
    method: ExtractionMethod,
    func,
    *args,
) -> None:
    report.units_attempted = 1
    text = await _run_blocking(func, *args)
    report.text = text
    if text:
        report.units_succeeded = 1
        report.method = method
    else:
        report.method = ExtractionMethod.FAILED
        report.failed_units.append((source.file_name or "file", "no_text"))


async def _extract(
    source: SourceFile,
    settings: ExtractionSettings,
    report: ExtractionReport,
) -> None:
    deadline = Deadline.from_settings(settings)
    kind = classify(source)
    report.kind = kind

    if kind is DocumentKind.PDF:
        await _extract_pdf(source, settings, deadline, report)
    elif kind is DocumentKind.WORD:
        await _extract_single(
            source, report, ExtractionMethod.WORD,
            extract_word_text, source.content, source.file_name,
        )
    elif kind is DocumentKind.SPREADSHEET:
        await _extract_single(
            source, report, ExtractionMethod.SPREADSHEET,
            extract_spreadsheet_text, source.content, source.file_name,
        )
    elif kind is DocumentKind.IMAGE:
        await _extract_single(
            source, report, ExtractionMethod.IMAGE_OCR,
            ocr_image, source.content, settings, deadline, source.file_name,
        )
    else:
        logger.warning(
            "Unsupported file type for text extraction: %r (%s)",
            source.media_type,
            source.file_name,
        )
        report.method = ExtractionMethod.UNSUPPORTED


async def extract_with_report(
    source: SourceFile,
    settings: ExtractionSettings | None = None,
) -> ExtractionReport:
    """Extract text from *source* and describe how it went.

    Never raises (cancellation by the caller excepted). The hard ceiling
    ``deadline_max_seconds`` applies to the whole call; reaching it discards
    any partial result.

    Args:
        source: The uploaded file.
        settings: Extraction configuration; loaded from YAML/env if omitted.

    Returns:
        ExtractionReport whose ``text`` is the final extracted string.
    """
    report = ExtractionReport()
    started = time.monotonic()
    try:
        if settings is None:
            settings = ExtractionSettings()
        await asyncio.wait_for(
            _extract(source, settings, report),
            timeout=settings.deadline_max_seconds,
        )
    except asyncio.TimeoutError:
        logger.error(
            "Extraction of %s exceeded %.0f seconds, giving up",
            source.file_name,
            settings.deadline_max_seconds,
        )
        report.text = ""
        report.method = ExtractionMethod.FAILED
        report.timed_out = True
    except Exception:
        logger.exception("Error extracting text from %s", source.file_name)
        report.text = ""
        report.method = ExtractionMethod.FAILED

    report.text = report.text.strip()
    report.elapsed_seconds = time.monotonic() - started
    logger.info(
        "Extraction finished for %s: kind=%s method=%s chars=%d units=%d/%d%s",
        source.file_name,
        report.kind.value,
        report.method.value,
        report.char_count,
        report.units_succeeded,
        report.units_attempted,
        " (timed out)" if report.timed_out else "",
    )
    return report


async def extract_text(
    source: SourceFile,
    settings: ExtractionSettings | None = None,
) -> str:
    """Best-effort plain text of *source*; empty string if nothing was found."""
    report = await extract_with_report(source, settings)
    return report.text


def extract_text_sync(
    source: SourceFile,
    settings: ExtractionSettings | None = None,
) -> str:
    """Blocking wrapper around :func:`extract_text` for non-async callers.

    Safe to call from code that is itself running inside an event loop
    (notebooks, async hosts): the extraction then gets its own loop on a
    helper thread, and this call blocks until it returns.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(extract_text(source, settings))

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="doctext-sync") as pool:
        return pool.submit(asyncio.run, extract_text(source, settings)).result()
