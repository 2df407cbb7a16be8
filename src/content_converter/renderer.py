"""Markup renderers.

A renderer turns a loaded markdown document into Confluence storage markup.
The page synchronizer accepts any MarkupRenderer; PandocRenderer is the
default.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from src.models.document import DocumentSource, RenderOptions

from .markdown_converter import MarkdownConverter

logger = logging.getLogger(__name__)


class MarkupRenderer(ABC):
    """Capability interface: markdown document to storage markup."""

    @abstractmethod
    def render(self, source: DocumentSource, options: RenderOptions) -> str:
        """Render the document's markdown to Confluence storage markup.

        Args:
            source: Loaded document (markdown without the title heading)
            options: Global rendering options

        Returns:
            Storage format markup
        """


class PandocRenderer(MarkupRenderer):
    """Default renderer backed by MarkdownConverter (Pandoc).

    The converter is created on first use so that constructing the
    renderer does not require Pandoc.
    """

    def __init__(self, converter: Optional[MarkdownConverter] = None):
        self._converter = converter

    @property
    def converter(self) -> MarkdownConverter:
        if self._converter is None:
            self._converter = MarkdownConverter()
        return self._converter

    def render(self, source: DocumentSource, options: RenderOptions) -> str:
        logger.debug(f"Rendering {source.document.file_path} with Pandoc")
        return self.converter.markdown_to_xhtml(source.markdown)
