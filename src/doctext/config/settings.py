"""Pydantic settings models for doctext extraction configuration.

Two settings classes load from separate YAML config files with environment
variable override support. Source priority (highest to lowest):

    1. Init arguments (e.g., ``ExtractionSettings(ocr_language="deu")``)
    2. Environment variables (with prefix, e.g., EXTRACTION_OCR_LANGUAGE)
    3. .env file
    4. YAML config file (e.g., config/extraction.yaml)
    5. Default values defined here

Config paths are resolved relative to PROJECT_ROOT so the library behaves the
same regardless of the caller's working directory.
"""

from pathlib import Path

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Resolve project root: settings.py -> config/ -> doctext/ -> src/ -> repo root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

_CONFIG_DIR = PROJECT_ROOT / "config"
_ENV_FILE = PROJECT_ROOT / ".env"

# Letters, digits and common punctuation. Quote characters, backslash and
# space are left out because tesseract's -c value is shell-split.
DEFAULT_OCR_WHITELIST = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
    ".,!?;:()[]{}-+=*/%$@#&|~^<>"
)


class _YamlBackedSettings(BaseSettings):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class ExtractionSettings(_YamlBackedSettings):
    """Extraction behaviour: routing thresholds, OCR tuning, deadlines."""

    # Scanned-document quick check
    large_file_threshold_bytes: int = 10 * 1024 * 1024  # 10 MiB

    # Fallback triggers (length of the assembled text, delimiters included)
    alternative_pass_min_chars: int = 100
    ocr_min_chars: int = 50

    # Reading-order reconstruction
    line_tolerance: float = 5.0
    alternative_line_tolerance: float = 10.0

    # Per-page retry on transient errors (total attempts, not retries)
    page_retry_attempts: int = 2

    # OCR
    render_zoom: float = 3.0
    ocr_language: str = "eng"
    tesseract_cmd: str = "tesseract"
    ocr_char_whitelist: str = DEFAULT_OCR_WHITELIST
    ocr_fix_confusions: bool = True

    # Wall-clock budget per document
    deadline_base_seconds: float = 60.0
    deadline_per_page_seconds: float = 30.0
    deadline_max_seconds: float = 1800.0

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "extraction.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="EXTRACTION_",
        extra="ignore",
    )


class LoggingSettings(_YamlBackedSettings):
    """Log destinations and rotation for the command-line entry point."""

    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5
    console_level: str = "INFO"

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "logging.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="LOG_",
        extra="ignore",
    )
