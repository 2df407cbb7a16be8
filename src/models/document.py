"""Local document data models."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Document:
    """A local markdown file configured for publishing.

    Identity is the file path. The document is read-only input: a page id
    resolved during the run is tracked by the synchronizer, never written
    back here.

    Attributes:
        file_path: Absolute path to the markdown file
        title: Explicit page title (None derives it from the first H1)
        page_id: Explicit Confluence page id
        parent_id: Explicit parent page id
        parent_page: Parent page title, used when the parent id is unknown
        toc: Per-document override of the global add_toc flag
    """
    file_path: str
    title: Optional[str] = None
    page_id: Optional[str] = None
    parent_id: Optional[str] = None
    parent_page: Optional[str] = None
    toc: Optional[bool] = None

    @property
    def directory(self) -> str:
        return os.path.dirname(self.file_path)


@dataclass(frozen=True)
class DocumentSource:
    """A Document together with its loaded markdown and effective title."""
    document: Document
    title: str
    markdown: str


@dataclass(frozen=True)
class RenderOptions:
    """Global rendering options.

    Attributes:
        prefix: Banner text shown in an info macro above the content
        add_toc: Insert a table of contents macro
        replace_section_with_toc: Heading whose section content is replaced
                                  by the table of contents
    """
    prefix: Optional[str] = None
    add_toc: bool = False
    replace_section_with_toc: Optional[str] = None
