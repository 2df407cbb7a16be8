"""Per-document page synchronization.

This module implements the push of one markdown document to one Confluence
page: render, check the local cache, resolve or create the page, reconcile
attachments, detect remote drift and update. Each document is handled in
two sequential phases, resolve_or_create then synchronize.
"""

import logging
from typing import Optional, Tuple

from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.errors import ConfluenceError, SyncError
from src.content_converter.renderer import MarkupRenderer, PandocRenderer
from src.content_converter.transforms import add_prefix, insert_toc, normalize_markup
from src.models.confluence_page import Ancestor, ConfluencePage, Space
from src.models.document import Document, DocumentSource

from .attachment_reconciler import AttachmentReconciler, rewrite_attachment_references
from .document_loader import load_document_source
from .errors import PageCreationError, RemotePageUnavailableError, SpaceRequiredError
from .models import PublishConfig, SyncOutcome
from .page_cache import PageCache
from .page_resolver import PageResolver

logger = logging.getLogger(__name__)


def is_remote_update_required(local_markup: str, remote_markup: str) -> bool:
    """Check whether the remote page content differs from the local markup.

    Both sides are normalized first (dynamic ids stripped, whitespace
    trimmed, &#39; decoded) so that Confluence's own rewrites do not count
    as drift.
    """
    return normalize_markup(local_markup) != normalize_markup(remote_markup)


class PageSynchronizer:
    """Pushes documents to Confluence pages.

    Example:
        >>> synchronizer = PageSynchronizer(api, config)
        >>> outcome = synchronizer.sync(config.pages[0], space)
    """

    def __init__(
        self,
        api: APIWrapper,
        config: PublishConfig,
        renderer: Optional[MarkupRenderer] = None,
        cache: Optional[PageCache] = None,
    ):
        """Initialize the synchronizer.

        Args:
            api: Gateway for all remote calls
            config: Run configuration (shared, read-only)
            renderer: Markdown renderer (default: PandocRenderer)
            cache: Local change cache (default: cache under config.cache_dir)
        """
        self.api = api
        self.config = config
        self.renderer = renderer or PandocRenderer()
        self.cache = cache or PageCache(config.cache_dir)
        self.resolver = PageResolver(api, config.space_key)
        self.reconciler = AttachmentReconciler(api, self.cache)

    def sync(
        self,
        document: Document,
        space: Optional[Space] = None,
        force: bool = False,
    ) -> SyncOutcome:
        """Synchronize one document.

        Errors are contained here: a failing document is logged and
        reported as FAILED so that the caller can continue with the next.

        Args:
            document: Document to publish
            space: Space resolved for this run (None if none configured)
            force: Skip the cache and drift checks, re-upload attachments

        Returns:
            SyncOutcome for the document
        """
        display_path = self.config.relative_path(document.file_path)
        try:
            logger.info(f"Starting to render \"{display_path}\"")
            source = load_document_source(document)
            markup = self.render(source)

            if not force and document.page_id and self.cache.is_up_to_date(document.page_id, markup):
                logger.info(f"Local cache for \"{display_path}\" is up to date, no update necessary")
                return SyncOutcome.UNCHANGED_LOCAL

            page_id, created = self.resolve_or_create(source, markup, space)
            try:
                outcome = self.synchronize(page_id, source, markup, force, created)
            except RemotePageUnavailableError as e:
                if created or document.page_id:
                    raise
                # A page found by title that cannot be fetched counts as missing.
                logger.warning(f"{e}, treating \"{source.title}\" as not found and creating new page")
                page_id, created = self.create_page(source, markup, space), True
                outcome = self.synchronize(page_id, source, markup, force, created)
            if outcome in (SyncOutcome.CREATED, SyncOutcome.UPDATED):
                logger.info(f"\"{source.title}\" saved in Confluence ({self.api.page_url(page_id)})")
            return outcome
        except SyncError as e:
            logger.error(f"Failed to publish \"{display_path}\": {e}")
            return SyncOutcome.FAILED
        except Exception as e:
            logger.exception(f"Unexpected error publishing \"{display_path}\": {e}")
            return SyncOutcome.FAILED

    def render(self, source: DocumentSource) -> str:
        """Render a document and apply table of contents and prefix."""
        markup = self.renderer.render(source, self.config.render_options)

        add_toc = source.document.toc if source.document.toc is not None else self.config.add_toc
        if add_toc:
            markup = insert_toc(markup, self.config.replace_section_with_toc)

        return add_prefix(markup, self.config.prefix)

    def resolve_or_create(
        self,
        source: DocumentSource,
        markup: str,
        space: Optional[Space],
    ) -> Tuple[str, bool]:
        """Phase one: find the page for a document, creating it if needed.

        Args:
            source: Loaded document
            markup: Rendered markup (attachment references not yet sanitized)
            space: Space to create the page in

        Returns:
            Tuple of (page_id, created)

        Raises:
            SpaceRequiredError: If the page must be created without a space
            PageCreationError: If the create response carries no id
        """
        document = source.document
        if document.page_id:
            return document.page_id, False

        page_id = self.resolver.find_page_id(
            source.title,
            parent_id=document.parent_id,
            parent_page=document.parent_page,
        )
        if page_id:
            logger.info(f"Found existing page {page_id} for \"{source.title}\"")
            return page_id, False

        logger.info(f"Could not find page \"{source.title}\" on Confluence, creating new page")
        return self.create_page(source, markup, space), True

    def create_page(self, source: DocumentSource, markup: str, space: Optional[Space]) -> str:
        """Create a blank page for a document and return its id.

        Raises:
            SpaceRequiredError: If no space is configured
            PageCreationError: If the create response carries no id
        """
        document = source.document
        if space is None:
            raise SpaceRequiredError(source.title)

        page = ConfluencePage.blank(space)
        page.title = source.title
        page.body = rewrite_attachment_references(markup)
        ancestor_id = self.resolver.resolve_ancestor_id(document, self.config.default_parent_page_id)
        page.ancestors = [Ancestor(id=ancestor_id)] if ancestor_id else []

        logger.info(f"Creating page \"{source.title}\"")
        response = self.api.create_page(page.to_payload())
        page_id = (response or {}).get("id")
        if not page_id:
            raise PageCreationError(source.title)

        page_id = str(page_id)
        self.cache.put(page_id, markup)
        return page_id

    def synchronize(
        self,
        page_id: str,
        source: DocumentSource,
        markup: str,
        force: bool = False,
        created: bool = False,
    ) -> SyncOutcome:
        """Phase two: reconcile attachments and update the page if it drifted.

        Args:
            page_id: Page resolved or created in phase one
            source: Loaded document
            markup: Rendered markup (attachment references not yet sanitized)
            force: Update even when the remote content matches
            created: Whether phase one created the page

        Returns:
            CREATED, UPDATED or UNCHANGED_REMOTE

        Raises:
            RemotePageUnavailableError: If listing attachments or fetching the page fails
        """
        try:
            body = self.reconciler.reconcile(markup, source.document, page_id, force)

            logger.debug(f"Fetching current page {page_id} for \"{source.title}\"")
            page = ConfluencePage.from_api(self.api.get_page(page_id))
        except ConfluenceError as e:
            raise RemotePageUnavailableError(page_id, str(e)) from e

        if not force and not is_remote_update_required(body, page.body):
            if created:
                return SyncOutcome.CREATED
            display_path = self.config.relative_path(source.document.file_path)
            logger.info(f"No change in remote version for \"{display_path}\" detected, no update necessary")
            return SyncOutcome.UNCHANGED_REMOTE

        ancestor_id = self.resolver.resolve_ancestor_id(
            source.document, self.config.default_parent_page_id
        )
        page.prepare_update(source.title, body, ancestor_id)

        logger.info(f"Updating page \"{source.title}\" to version {page.version}")
        self.api.update_page(page_id, page.to_payload())
        self.cache.put(page_id, markup)
        return SyncOutcome.CREATED if created else SyncOutcome.UPDATED
