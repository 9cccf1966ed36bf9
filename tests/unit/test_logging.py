"""
Logging Setup Tests
"""
import json
import logging

import pytest

from doctext.logging import setup_logging


@pytest.fixture
def restore_root_logger():
    """Put pytest's own handlers back after setup_logging replaces them"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test the JSON file + console handler pair"""

    def test_json_records(self, tmp_path, restore_root_logger):
        """Should write renamed JSON fields to extraction.log"""
        setup_logging(log_dir=str(tmp_path), log_level_console="warning")
        logging.getLogger("doctext.extractor.ocr").info("Page %d done", 3)
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = (tmp_path / "extraction.log").read_text(encoding="utf-8").splitlines()
        record = json.loads(lines[-1])
        assert record["message"] == "Page 3 done"
        assert record["component"] == "doctext.extractor.ocr"
        assert record["level"] == "INFO"
        assert "timestamp" in record

    def test_repeat_calls_do_not_duplicate(self, tmp_path, restore_root_logger):
        setup_logging(log_dir=str(tmp_path))
        setup_logging(log_dir=str(tmp_path))
        assert len(logging.getLogger().handlers) == 2

    def test_chatty_libraries_quietened(self, tmp_path, restore_root_logger):
        setup_logging(log_dir=str(tmp_path))
        assert logging.getLogger("pdfminer").level == logging.WARNING
        assert logging.getLogger("PIL").level == logging.WARNING
