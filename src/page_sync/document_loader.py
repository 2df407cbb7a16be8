"""Markdown source loading and title derivation."""

import re
from typing import Tuple

from src.models.document import Document, DocumentSource

from .errors import TitleNotFoundError

H1_TITLE_PATTERN = re.compile(r'^#(?!#) ?(?P<title>[^\n\r]+)')
EMPTY_TABLE_CELL_PATTERN = re.compile(r'\|[ ]*\|')


def extract_title(markdown: str, file_path: str = "<markdown>") -> Tuple[str, str]:
    """Split a leading level-1 heading off the markdown.

    Only a heading on the very first line counts.

    Args:
        markdown: Markdown content
        file_path: Path used in the error message

    Returns:
        Tuple of (title, markdown without the heading)

    Raises:
        TitleNotFoundError: If the content does not start with a "#" heading
    """
    match = H1_TITLE_PATTERN.match(markdown)
    if match is None:
        raise TitleNotFoundError(file_path)
    return match.group('title').strip(), markdown[match.end():]


def load_document_source(document: Document) -> DocumentSource:
    """Read a document's markdown and determine its title.

    An explicit title wins; otherwise the leading H1 is used as title and
    removed from the body. Empty table cells are filled with &nbsp; so that
    they survive rendering.

    Raises:
        TitleNotFoundError: If no title is configured or derivable
        OSError: If the file cannot be read
    """
    with open(document.file_path, 'r', encoding='utf-8') as f:
        markdown = f.read()

    # Applied repeatedly: adjacent empty cells share a pipe
    previous = None
    while previous != markdown:
        previous = markdown
        markdown = EMPTY_TABLE_CELL_PATTERN.sub('|&nbsp;|', markdown)

    if document.title:
        return DocumentSource(document=document, title=document.title, markdown=markdown)

    title, markdown = extract_title(markdown, document.file_path)
    return DocumentSource(document=document, title=title, markdown=markdown)
