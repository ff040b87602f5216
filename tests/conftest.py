import io
from pathlib import Path

import pytest

from settings import Settings
from utils.template_registry import TemplateRegistry


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings instance writing into a fresh temp directory."""
    return Settings(output_dir=tmp_path / "output")


@pytest.fixture
def registry() -> TemplateRegistry:
    """Registry holding the four built-in templates, default 'business'."""
    return TemplateRegistry.with_builtins()


@pytest.fixture
def docx_bytes():
    """Build an in-memory DOCX from a list of paragraph strings."""
    from docx import Document

    def _build(paragraphs: list[str]) -> bytes:
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        buf = io.BytesIO()
        doc.save(buf)
        return buf.getvalue()

    return _build
