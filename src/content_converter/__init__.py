"""Content conversion module for markdown → Confluence storage format.

This module provides the renderers that turn local markdown into storage
markup and the text transforms applied to that markup (table of contents,
prefix banner, dynamic-id normalization).
"""

from .markdown_converter import MarkdownConverter
from .renderer import MarkupRenderer, PandocRenderer
from .transforms import add_prefix, insert_toc, normalize_markup, remove_dynamic_ids

__all__ = [
    'MarkdownConverter',
    'MarkupRenderer',
    'PandocRenderer',
    'add_prefix',
    'insert_toc',
    'normalize_markup',
    'remove_dynamic_ids',
]
