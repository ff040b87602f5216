from pathlib import Path

import pytest
from pydantic import ValidationError

from settings import Settings


def test_settings_defaults():
    s = Settings()
    assert s.default_template == "business"
    assert s.templates_file is None
    assert s.output_dir == Path("./output")
    assert s.max_document_bytes == 10 * 1024 * 1024
    assert s.log_level == "INFO"


def test_max_document_bytes_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(max_document_bytes=0)


def test_log_level_is_normalised():
    assert Settings(log_level="debug").log_level == "DEBUG"


def test_unknown_log_level_raises():
    with pytest.raises(ValidationError) as exc_info:
        Settings(log_level="chatty")
    assert "log_level" in str(exc_info.value)


def test_settings_env_prefix(monkeypatch):
    monkeypatch.setenv("ATS_DEFAULT_TEMPLATE", "creative")
    monkeypatch.setenv("ATS_MAX_DOCUMENT_BYTES", "2048")
    s = Settings()
    assert s.default_template == "creative"
    assert s.max_document_bytes == 2048
