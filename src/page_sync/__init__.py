"""Page synchronization: markdown documents to Confluence pages.

This module provides the one-way publish pipeline: the local change cache,
page resolution, attachment reconciliation and per-document
synchronization.
"""

from .attachment_reconciler import (
    AttachmentReconciler,
    extract_attachments,
    rewrite_attachment_references,
    sanitize_attachment_name,
)
from .document_loader import extract_title, load_document_source
from .errors import (
    CacheError,
    PageCreationError,
    PageSyncError,
    SpaceNotFoundError,
    SpaceRequiredError,
    TitleNotFoundError,
)
from .models import PublishConfig, PublishSummary, SyncOutcome
from .page_cache import PageCache
from .page_resolver import PageResolver
from .page_synchronizer import PageSynchronizer, is_remote_update_required
from .publisher import publish_pages, resolve_space

__all__ = [
    'AttachmentReconciler',
    'CacheError',
    'PageCache',
    'PageCreationError',
    'PageResolver',
    'PageSyncError',
    'PageSynchronizer',
    'PublishConfig',
    'PublishSummary',
    'SpaceNotFoundError',
    'SpaceRequiredError',
    'SyncOutcome',
    'TitleNotFoundError',
    'extract_attachments',
    'extract_title',
    'is_remote_update_required',
    'load_document_source',
    'publish_pages',
    'resolve_space',
    'rewrite_attachment_references',
    'sanitize_attachment_name',
]
