"""Configuration management for the book OCR pipeline."""

import re
from typing import Optional

from pydantic import BaseModel, Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings

DEFAULT_INPUT_PATTERN = r".*\.(?i:tif|tiff|pdf)"
DEFAULT_OUTPUT_NAME = "book-ocr.pdf"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Run defaults (overridable from the CLI)
    dpi: int = 300
    input_pattern: str = DEFAULT_INPUT_PATTERN
    output_name: str = DEFAULT_OUTPUT_NAME

    # Staging
    staging_dir_name: str = ".book"
    keep_staging_on_failure: bool = False

    # Intake
    skip_unsupported: bool = True

    # OCR
    ocr_language: str = "eng"
    ocr_psm: int = 1
    ocr_timeout: int = 0  # seconds, 0 disables

    # Page splitter
    unpaper_binary: str = "unpaper"
    unpaper_timeout: Optional[int] = None

    # Embedding
    jpeg_quality: int = 95

    # Logging
    log_level: str = "INFO"

    class Config:
        env_prefix = "BOOKOCR_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()


class RunConfig(BaseModel):
    """Immutable parameters of a single run."""

    dpi: PositiveInt = 300
    input_pattern: str = DEFAULT_INPUT_PATTERN
    output_name: str = Field(default=DEFAULT_OUTPUT_NAME, min_length=1)

    class Config:
        frozen = True

    @field_validator("input_pattern")
    @classmethod
    def _pattern_compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid input pattern {value!r}: {exc}") from exc
        return value

    @field_validator("output_name")
    @classmethod
    def _bare_filename(cls, value: str) -> str:
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"Output name must be a bare filename: {value!r}")
        return value

    @classmethod
    def from_settings(cls, base: Settings = settings, **overrides) -> "RunConfig":
        """Build a run configuration from settings, applying non-None overrides."""
        values = {
            "dpi": base.dpi,
            "input_pattern": base.input_pattern,
            "output_name": base.output_name,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def matches(self, filename: str) -> bool:
        """Check whether a filename is selected by the input pattern."""
        return re.fullmatch(self.input_pattern, filename) is not None
