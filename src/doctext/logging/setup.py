"""Logging setup for the doctext command-line entry point and smoke runs.

Extraction is noisy by nature (one record per page, per OCR pass, per
fallback tier), so records go two ways: everything at DEBUG into a rotating
JSON file, ``extraction.log``, for later inspection, and a short
human-readable stream on the console at the configured level.

As a library, doctext never touches logging configuration on import; its
modules only call ``logging.getLogger(__name__)``. Applications embedding
the extractor keep their own handlers and need not call this at all.
"""

import logging
import logging.handlers
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

# pdfminer (under pdfplumber) logs every operator; PIL logs each decoder chunk
_CHATTY_LIBRARIES = ("pdfminer", "PIL")


def setup_logging(
    log_dir: str = "logs",
    log_level_file: int = logging.DEBUG,
    log_level_console: int | str = logging.INFO,
    max_bytes: int = 10_485_760,  # 10MB
    backup_count: int = 5,
) -> None:
    """Route extraction logs to ``<log_dir>/extraction.log`` and the console.

    Safe to call again (the CLI and the smoke script each call it once):
    existing root handlers are replaced rather than duplicated. Third-party
    parsers that log per content-stream operator are held at WARNING.

    Args:
        log_dir: Directory for log files.
        log_level_file: Logging level for the file handler (default DEBUG).
        log_level_console: Logging level for the console handler (default
            INFO). Level names such as ``"WARNING"`` are accepted.
        max_bytes: Maximum size per log file before rotation (default 10MB).
        backup_count: Number of rotated backup files to keep (default 5).
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything; handlers filter

    root_logger.handlers.clear()

    # --- File handler: JSON format, rotating ---
    file_handler = logging.handlers.RotatingFileHandler(
        filename=str(Path(log_dir) / "extraction.log"),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level_file)

    json_formatter = JsonFormatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "component",
        },
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    file_handler.setFormatter(json_formatter)

    # --- Console handler: human-readable text ---
    console_handler = logging.StreamHandler()
    if isinstance(log_level_console, str):
        log_level_console = log_level_console.upper()
    console_handler.setLevel(log_level_console)

    text_formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler.setFormatter(text_formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
