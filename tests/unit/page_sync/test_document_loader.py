"""Unit tests for page_sync.document_loader module."""

import pytest

from src.models.document import Document
from src.page_sync.document_loader import extract_title, load_document_source
from src.page_sync.errors import TitleNotFoundError


class TestExtractTitle:

    def test_splits_leading_heading(self):
        title, body = extract_title("# Setup Guide\n\nInstall it.\n")
        assert title == "Setup Guide"
        assert body == "\n\nInstall it.\n"

    def test_heading_without_space(self):
        title, _ = extract_title("#Setup\nbody")
        assert title == "Setup"

    def test_heading_must_be_first_line(self):
        with pytest.raises(TitleNotFoundError):
            extract_title("intro\n# Setup Guide\n")

    def test_level_two_heading_is_not_a_title(self):
        with pytest.raises(TitleNotFoundError) as exc_info:
            extract_title("## Setup Guide\n", "docs/setup.md")
        assert exc_info.value.file_path == "docs/setup.md"


class TestLoadDocumentSource:

    def test_explicit_title_keeps_heading_in_body(self, tmp_path):
        path = tmp_path / "setup.md"
        path.write_text("# Heading\nText\n", encoding="utf-8")

        source = load_document_source(Document(file_path=str(path), title="Explicit"))

        assert source.title == "Explicit"
        assert source.markdown == "# Heading\nText\n"

    def test_title_from_heading(self, tmp_path):
        path = tmp_path / "setup.md"
        path.write_text("# Setup Guide\nText\n", encoding="utf-8")

        source = load_document_source(Document(file_path=str(path)))

        assert source.title == "Setup Guide"
        assert source.markdown == "\nText\n"

    def test_missing_title_raises(self, tmp_path):
        path = tmp_path / "notes.md"
        path.write_text("no heading here\n", encoding="utf-8")

        with pytest.raises(TitleNotFoundError):
            load_document_source(Document(file_path=str(path)))

    def test_empty_table_cells_are_filled(self, tmp_path):
        path = tmp_path / "table.md"
        path.write_text("| a | | |\n|---|---|---|\n", encoding="utf-8")

        source = load_document_source(Document(file_path=str(path), title="T"))

        assert source.markdown.startswith("| a |&nbsp;|&nbsp;|\n")

    def test_missing_file_raises_os_error(self, tmp_path):
        with pytest.raises(OSError):
            load_document_source(Document(file_path=str(tmp_path / "missing.md")))
