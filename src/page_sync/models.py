"""Data models for page synchronization.

PublishConfig is built once per run by the configuration loader and passed
by reference through the publisher and synchronizer; it is frozen so that
no component can change settings for the documents that follow.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from src.models.document import Document, RenderOptions


@dataclass(frozen=True)
class PublishConfig:
    """Configuration of one publish run.

    Attributes:
        config_path: Absolute path of the configuration file
        pages: Documents to publish, in order
        base_url: Confluence base URL (None falls back to CONFLUENCE_URL)
        space_key: Space to search and create pages in
        cache_path: Cache directory; relative paths are resolved against
                    the configuration file's directory
        default_parent_page_id: Parent for pages that declare none
        prefix: Banner text prepended to every page
        add_toc: Insert a table of contents in every page
        replace_section_with_toc: Heading whose section becomes the ToC
        insecure: Skip TLS certificate verification
    """
    config_path: str
    pages: Tuple[Document, ...] = ()
    base_url: Optional[str] = None
    space_key: Optional[str] = None
    cache_path: str = "build"
    default_parent_page_id: Optional[str] = None
    prefix: Optional[str] = None
    add_toc: bool = False
    replace_section_with_toc: Optional[str] = None
    insecure: bool = False

    @property
    def config_dir(self) -> str:
        return os.path.dirname(self.config_path)

    @property
    def cache_dir(self) -> str:
        if os.path.isabs(self.cache_path):
            return self.cache_path
        return os.path.normpath(os.path.join(self.config_dir, self.cache_path))

    @property
    def render_options(self) -> RenderOptions:
        return RenderOptions(
            prefix=self.prefix,
            add_toc=self.add_toc,
            replace_section_with_toc=self.replace_section_with_toc,
        )

    def relative_path(self, file_path: str) -> str:
        """Path of a document as written in the configuration, for log lines."""
        return os.path.relpath(file_path, self.config_dir)


class SyncOutcome(Enum):
    """What happened to a single document."""
    UNCHANGED_LOCAL = "unchanged_local"
    UNCHANGED_REMOTE = "unchanged_remote"
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass
class PublishSummary:
    """Tally of document outcomes for one publish run.

    Attributes:
        created: Pages created
        updated: Pages updated
        unchanged: Pages skipped (local cache or remote content up to date)
        failed: Documents whose processing was aborted
        failed_files: Paths of the failed documents
    """
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    failed: int = 0
    failed_files: List[str] = field(default_factory=list)

    def record(self, document: Document, outcome: SyncOutcome) -> None:
        if outcome is SyncOutcome.CREATED:
            self.created += 1
        elif outcome is SyncOutcome.UPDATED:
            self.updated += 1
        elif outcome is SyncOutcome.FAILED:
            self.failed += 1
            self.failed_files.append(document.file_path)
        else:
            self.unchanged += 1

    @property
    def total(self) -> int:
        return self.created + self.updated + self.unchanged + self.failed
