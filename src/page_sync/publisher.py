"""Publish run orchestration.

Resolves the space once, then hands the configured documents to the
PageSynchronizer strictly one after another and tallies the outcomes.
"""

import logging
from typing import Optional

from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.errors import (
    APIUnreachableError,
    ConfluenceError,
    InvalidCredentialsError,
)
from src.content_converter.renderer import MarkupRenderer
from src.models.confluence_page import Space

from .errors import SpaceNotFoundError
from .models import PublishConfig, PublishSummary
from .page_synchronizer import PageSynchronizer

logger = logging.getLogger(__name__)


def resolve_space(api: APIWrapper, space_key: Optional[str]) -> Optional[Space]:
    """Fetch the configured space.

    Returns:
        Space, or None when no space key is configured

    Raises:
        SpaceNotFoundError: If the space cannot be fetched
        InvalidCredentialsError: If authentication fails
        APIUnreachableError: If Confluence cannot be reached
    """
    if not space_key:
        logger.debug("No space key configured, new pages cannot be created")
        return None

    try:
        data = api.get_space(space_key)
    except (InvalidCredentialsError, APIUnreachableError):
        raise
    except ConfluenceError as e:
        raise SpaceNotFoundError(space_key, str(e)) from e

    if not data:
        raise SpaceNotFoundError(space_key)

    space = Space.from_api(data)
    logger.debug(f"Resolved space {space.key} ({space.name})")
    return space


def publish_pages(
    config: PublishConfig,
    api: APIWrapper,
    force: bool = False,
    renderer: Optional[MarkupRenderer] = None,
) -> PublishSummary:
    """Publish every configured document.

    A failing document does not stop the run; it is counted in the
    summary's failed tally.

    Args:
        config: Run configuration
        api: Gateway for all remote calls
        force: Bypass the cache and drift checks for every document
        renderer: Markdown renderer (default: PandocRenderer)

    Returns:
        PublishSummary of the run

    Raises:
        SpaceNotFoundError: If the configured space cannot be resolved
    """
    space = resolve_space(api, config.space_key)
    synchronizer = PageSynchronizer(api, config, renderer=renderer)

    summary = PublishSummary()
    for document in config.pages:
        outcome = synchronizer.sync(document, space, force=force)
        summary.record(document, outcome)

    logger.info(
        f"Publish finished: {summary.created} created, {summary.updated} updated, "
        f"{summary.unchanged} unchanged, {summary.failed} failed"
    )
    return summary
