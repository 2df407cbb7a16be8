"""Local change cache for rendered pages.

This module provides the PageCache class, which records the markup last
pushed for each page id so that a run with unchanged local files makes no
network calls. The same directory doubles as the scratch location for
attachment uploads.
"""

import logging
import os
from typing import Optional

from .errors import CacheError

logger = logging.getLogger(__name__)


class PageCache:
    """Filesystem cache of rendered markup keyed by page id.

    Each entry is a single UTF-8 file named after the page id:

        build/
          1234567890     # markup last pushed to page 1234567890
          _images_a.png  # transient upload copy (removed after upload)

    Entries are only written after a successful create or update, so the
    cache never claims a page is current when the push failed.

    Example:
        >>> cache = PageCache("build")
        >>> if not cache.is_up_to_date("1234567890", markup):
        ...     # push, then record
        ...     cache.put("1234567890", markup)
    """

    def __init__(self, cache_dir: str):
        """Initialize page cache.

        The directory is not created until something is written.

        Args:
            cache_dir: Cache directory (relative paths are made absolute)
        """
        if not os.path.isabs(cache_dir):
            cache_dir = os.path.abspath(cache_dir)
        self.cache_dir = cache_dir

    def _ensure_cache_dir_exists(self) -> None:
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
        except OSError as e:
            raise CacheError(
                cache_path=self.cache_dir,
                message=f"Failed to create cache directory: {e}",
            )

    def _entry_path(self, page_id: str) -> str:
        return os.path.join(self.cache_dir, str(page_id))

    def get(self, page_id: Optional[str]) -> Optional[str]:
        """Return the markup last recorded for a page.

        Args:
            page_id: Confluence page ID (None always misses)

        Returns:
            Cached markup, or None on a cache miss

        Raises:
            CacheError: If the entry exists but cannot be read
        """
        if not page_id:
            return None

        entry_path = self._entry_path(page_id)
        if not os.path.isfile(entry_path):
            logger.debug(f"Cache miss: no entry for page {page_id}")
            return None

        try:
            with open(entry_path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise CacheError(
                cache_path=entry_path,
                message=f"Failed to read cache entry: {e}",
            )

    def put(self, page_id: str, markup: str) -> None:
        """Record the markup pushed for a page.

        Args:
            page_id: Confluence page ID
            markup: Rendered storage markup

        Raises:
            CacheError: If the entry cannot be written
        """
        self._ensure_cache_dir_exists()
        entry_path = self._entry_path(page_id)
        try:
            with open(entry_path, 'w', encoding='utf-8') as f:
                f.write(markup)
        except OSError as e:
            raise CacheError(
                cache_path=entry_path,
                message=f"Failed to write cache entry: {e}",
            )
        logger.debug(f"Cached markup for page {page_id} ({len(markup)} chars)")

    def is_up_to_date(self, page_id: Optional[str], markup: str) -> bool:
        """Check whether the cached markup equals the given markup exactly."""
        cached = self.get(page_id)
        return cached is not None and cached == markup

    def scratch_path(self, name: str) -> str:
        """Path inside the cache directory for a transient file.

        Args:
            name: Flat filename (already sanitized)

        Returns:
            Absolute path; the cache directory exists afterwards
        """
        self._ensure_cache_dir_exists()
        return os.path.join(self.cache_dir, name)
