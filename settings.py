import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    default_template: str = "business"
    templates_file: Path | None = None
    output_dir: Path = Path("./output")
    max_document_bytes: int = 10 * 1024 * 1024
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ATS_",
        env_file_encoding="utf-8",
    )

    @field_validator("max_document_bytes")
    @classmethod
    def document_limit_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_document_bytes must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v!r}")
        return level
