"""Page and ancestor resolution by title.

This module locates existing Confluence pages for documents that do not
declare a page id, and determines the parent page to publish under. A
title is only unique per space, so a declared parent narrows the search
to pages whose ancestor chain contains it.
"""

import logging
from typing import Any, Dict, List, Optional

from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.errors import ConfluenceError
from src.models.document import Document

logger = logging.getLogger(__name__)


class PageResolver:
    """Resolves page ids and parent ids by title search.

    Example:
        >>> resolver = PageResolver(api, "DOCS")
        >>> page_id = resolver.find_page_id("Setup Guide", parent_page="Guides")
    """

    def __init__(self, api: APIWrapper, space_key: Optional[str] = None):
        """Initialize the resolver.

        Args:
            api: Gateway used for title searches
            space_key: Space to scope searches to (None searches everywhere)
        """
        self.api = api
        self.space_key = space_key

    def _search(self, title: str) -> List[Dict[str, Any]]:
        """Title search; any gateway error counts as no results."""
        try:
            return self.api.search_pages_by_title(title, self.space_key)
        except ConfluenceError as e:
            logger.warning(f"Searching for page '{title}' failed, treating as not found: {e}")
            return []

    def find_page_id(
        self,
        title: str,
        parent_id: Optional[str] = None,
        parent_page: Optional[str] = None,
    ) -> Optional[str]:
        """Find the id of an existing page by title.

        With a declared parent, only pages whose ancestor chain contains
        that parent (matched by id when parent_id is given, otherwise by
        title) are candidates. The first candidate wins.

        Args:
            title: Page title
            parent_id: Declared parent page id
            parent_page: Declared parent page title

        Returns:
            Page id, or None if no suitable page exists
        """
        results = self._search(title)
        if not results:
            logger.debug(f"No page titled '{title}' found")
            return None

        if parent_id:
            candidates = [
                page for page in results
                if any(str(a.get("id")) == str(parent_id) for a in page.get("ancestors") or [])
            ]
        elif parent_page:
            candidates = [
                page for page in results
                if any(a.get("title") == parent_page for a in page.get("ancestors") or [])
            ]
        else:
            candidates = results

        if not candidates:
            logger.debug(
                f"Found {len(results)} page(s) titled '{title}' but none "
                f"under parent {parent_id or parent_page}"
            )
            return None

        page_id = str(candidates[0].get("id"))
        logger.debug(f"Resolved '{title}' to page {page_id}")
        return page_id

    def resolve_ancestor_id(
        self,
        document: Document,
        default_parent_id: Optional[str] = None,
    ) -> Optional[str]:
        """Determine the parent page id for a document.

        Precedence: explicit parent_id, then parent_page resolved by title,
        then the configured default parent.
        """
        if document.parent_id:
            return document.parent_id

        if document.parent_page:
            parent_id = self.find_page_id(document.parent_page)
            if parent_id is None:
                logger.warning(
                    f"Parent page '{document.parent_page}' not found, "
                    f"{document.file_path} will be published without a parent"
                )
            return parent_id

        return default_parent_id
