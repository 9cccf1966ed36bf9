"""doctext command-line entry point.

Startup sequence:
    1. Load logging configuration (needed for log_dir and rotation)
    2. Setup logging (must happen before any code that logs)
    3. Load extraction configuration
    4. Read the file and extract its text
    5. Print the text, or the JSON diagnostics with --report

Exit codes: 0 text extracted, 1 nothing extracted, 2 unsupported or
unreadable file.
"""

import argparse
import asyncio
import json
import logging
import sys

from doctext.config import ExtractionSettings, LoggingSettings
from doctext.extractor import SourceFile, extract_with_report, is_extractable
from doctext.logging import setup_logging

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="doctext",
        description="Extract searchable plain text from a PDF, Office file or image.",
    )
    parser.add_argument("path", help="File to extract text from")
    parser.add_argument(
        "--media-type",
        default=None,
        help="Declared media type (guessed from the file name if omitted)",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Print extraction diagnostics as JSON instead of the text",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Extract one file and write the result to stdout."""
    args = _parse_args(argv)

    # 1-2. Logging first so every later step is captured
    log_settings = LoggingSettings()
    setup_logging(
        log_dir=log_settings.log_dir,
        log_level_console=log_settings.console_level,
        max_bytes=log_settings.log_max_bytes,
        backup_count=log_settings.log_backup_count,
    )

    # 3. Extraction config
    settings = ExtractionSettings()
    logger.info(
        "Config loaded -- extraction: ocr_language=%s, render_zoom=%s, "
        "large_file_threshold=%d bytes, deadline_max=%ss",
        settings.ocr_language,
        settings.render_zoom,
        settings.large_file_threshold_bytes,
        settings.deadline_max_seconds,
    )

    # 4. Read and extract
    try:
        source = SourceFile.from_path(args.path, media_type=args.media_type)
    except OSError as e:
        logger.error("Cannot read %s: %s", args.path, e)
        return 2

    if not is_extractable(source):
        logger.warning(
            "Not an extractable file: %s (media type %r)",
            source.file_name,
            source.media_type,
        )
        return 2

    report = asyncio.run(extract_with_report(source, settings))

    # 5. Output
    if args.report:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(report.text)

    return 0 if report.text else 1


if __name__ == "__main__":
    sys.exit(main())
