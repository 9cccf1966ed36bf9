"""
Settings Loading Tests
"""
from doctext.config import ExtractionSettings, LoggingSettings, load_all_settings


class TestExtractionSettings:
    """Test defaults and environment overrides"""

    def test_defaults(self):
        settings = ExtractionSettings()
        assert settings.large_file_threshold_bytes == 10 * 1024 * 1024
        assert settings.alternative_pass_min_chars == 100
        assert settings.ocr_min_chars == 50
        assert settings.render_zoom == 3.0
        assert settings.page_retry_attempts == 2

    def test_environment_override(self, monkeypatch):
        """Should let EXTRACTION_* variables override YAML and defaults"""
        monkeypatch.setenv("EXTRACTION_OCR_LANGUAGE", "deu")
        monkeypatch.setenv("EXTRACTION_OCR_FIX_CONFUSIONS", "false")
        settings = ExtractionSettings()
        assert settings.ocr_language == "deu"
        assert settings.ocr_fix_confusions is False

    def test_init_arguments_win(self, monkeypatch):
        monkeypatch.setenv("EXTRACTION_OCR_MIN_CHARS", "10")
        assert ExtractionSettings(ocr_min_chars=75).ocr_min_chars == 75


class TestLoggingSettings:
    def test_prefix(self, monkeypatch):
        monkeypatch.setenv("LOG_CONSOLE_LEVEL", "WARNING")
        assert LoggingSettings().console_level == "WARNING"

    def test_load_all(self):
        extraction, logging_settings = load_all_settings()
        assert isinstance(extraction, ExtractionSettings)
        assert isinstance(logging_settings, LoggingSettings)
