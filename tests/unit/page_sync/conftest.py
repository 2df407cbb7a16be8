"""Shared fixtures for page_sync unit tests."""

import pytest
from unittest.mock import Mock

from src.confluence_client.api_wrapper import APIWrapper
from src.content_converter.renderer import MarkupRenderer
from src.page_sync.models import PublishConfig
from src.page_sync.page_cache import PageCache


class EchoRenderer(MarkupRenderer):
    """Renders markdown as a single paragraph, verbatim."""

    def render(self, source, options):
        return f"<p>{source.markdown.strip()}</p>"


@pytest.fixture
def docs_dir(tmp_path):
    path = tmp_path / "docs"
    path.mkdir()
    return path


@pytest.fixture
def make_config(docs_dir):
    def _make_config(**overrides):
        values = {"config_path": str(docs_dir / "confluence-publish.yaml")}
        values.update(overrides)
        return PublishConfig(**values)
    return _make_config


@pytest.fixture
def cache(docs_dir):
    return PageCache(str(docs_dir / "build"))


@pytest.fixture
def renderer():
    return EchoRenderer()


@pytest.fixture
def api():
    """Gateway mock with an empty remote side."""
    mock_api = Mock(spec=APIWrapper)
    mock_api.search_pages_by_title.return_value = []
    mock_api.get_attachments.return_value = []
    mock_api.page_url.side_effect = lambda page_id: f"https://wiki/pages/viewpage.action?pageId={page_id}"
    return mock_api
