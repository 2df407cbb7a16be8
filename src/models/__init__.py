"""Data models for documents, Confluence pages and attachments."""

from src.models.attachment import LocalAttachment, RemoteAttachment
from src.models.confluence_page import Ancestor, ConfluencePage, Space
from src.models.document import Document, DocumentSource, RenderOptions

__all__ = [
    'Ancestor',
    'ConfluencePage',
    'Document',
    'DocumentSource',
    'LocalAttachment',
    'RemoteAttachment',
    'RenderOptions',
    'Space',
]
