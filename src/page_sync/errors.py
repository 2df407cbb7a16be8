"""Typed exception hierarchy for page synchronization errors.

Every exception here aborts the processing of a single document; the
publisher logs it and moves on to the next document.
"""

from typing import Optional

from src.confluence_client.errors import SyncError


class PageSyncError(SyncError):
    """Base exception for all page synchronization errors."""
    pass


class TitleNotFoundError(PageSyncError):
    """Raised when a document has no configured title and no leading H1."""

    def __init__(self, file_path: str):
        super().__init__(
            f"Missing title property in config and no title found in markdown: {file_path}"
        )
        self.file_path = file_path


class SpaceRequiredError(PageSyncError):
    """Raised when a page must be created but no space is configured."""

    def __init__(self, title: str):
        super().__init__(
            f"No space specified in config, cannot create page '{title}'"
        )
        self.title = title


class SpaceNotFoundError(PageSyncError):
    """Raised when the configured space cannot be fetched."""

    def __init__(self, space_key: str, reason: Optional[str] = None):
        message = f"Could not find space in Confluence with key {space_key}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.space_key = space_key


class PageCreationError(PageSyncError):
    """Raised when creating a page returns no page id."""

    def __init__(self, title: str):
        super().__init__(f"Creating page failed: {title}")
        self.title = title


class CacheError(PageSyncError):
    """Raised when the local change cache cannot be read or written."""

    def __init__(self, cache_path: str, message: str):
        super().__init__(f"Cache error at {cache_path}: {message}")
        self.cache_path = cache_path


class RemotePageUnavailableError(PageSyncError):
    """Raised when an existing page cannot be fetched or its attachments listed."""

    def __init__(self, page_id: str, reason: str):
        super().__init__(f"Could not fetch page {page_id}: {reason}")
        self.page_id = page_id
        self.reason = reason
