"""Attachment reconciliation for published pages.

This module makes the attachment set of a Confluence page mirror the local
files referenced by the rendered markup. Attachments are matched by
sanitized filename and byte size only; there is no content hashing.
"""

import html
import logging
import os
import re
import shutil
from typing import List

from src.confluence_client.api_wrapper import APIWrapper
from src.models.attachment import LocalAttachment, RemoteAttachment
from src.models.document import Document

from .page_cache import PageCache

logger = logging.getLogger(__name__)

ATTACHMENT_REFERENCE_PATTERN = re.compile(r'<ri:attachment ri:filename="(.+?)" */>')
ATTACHMENT_FILENAME_PATTERN = re.compile(r'(<ri:attachment ri:filename=")(.+?)(")')
UNSAFE_NAME_PATTERN = re.compile(r'\.\.[/\\]|\.\.|[/\\]')


def sanitize_attachment_name(path: str) -> str:
    """Flatten a relative path into a filename Confluence accepts.

    "../" and "..\\" sequences, remaining ".." sequences and path separators
    are each replaced by a single underscore.

    Example:
        >>> sanitize_attachment_name("../images/a.png")
        '_images_a.png'
    """
    return UNSAFE_NAME_PATTERN.sub('_', path)


def rewrite_attachment_references(markup: str) -> str:
    """Replace every attachment filename in the markup by its sanitized form.

    Filenames are XML-escaped in the markup; they are sanitized unescaped
    and escaped again.
    """
    return ATTACHMENT_FILENAME_PATTERN.sub(
        lambda match: match.group(1) + escaped_remote_name(match.group(2)) + match.group(3),
        markup,
    )


def escaped_remote_name(reference: str) -> str:
    return html.escape(sanitize_attachment_name(html.unescape(reference)), quote=True)


def extract_attachments(markup: str, document: Document) -> List[LocalAttachment]:
    """Collect the local files referenced as attachments by the markup.

    References starting with "http" are skipped. Paths are XML-unescaped
    and resolved against the document's directory; files that do not
    exist are logged and left out.

    Args:
        markup: Rendered storage markup (filenames not yet sanitized)
        document: Document the markup was rendered from

    Returns:
        LocalAttachment list in reference order
    """
    attachments: List[LocalAttachment] = []
    for reference in ATTACHMENT_REFERENCE_PATTERN.findall(markup):
        if reference.startswith('http'):
            continue

        reference = html.unescape(reference)
        absolute_path = os.path.join(document.directory, reference)
        if not os.path.isfile(absolute_path):
            logger.error(
                f"Attachment file does not exist: {absolute_path} "
                f"(referenced by {document.file_path})"
            )
            continue

        attachments.append(LocalAttachment(
            original_path=reference,
            absolute_path=absolute_path,
            size=os.path.getsize(absolute_path),
            remote_name=sanitize_attachment_name(reference),
        ))
    return attachments


class AttachmentReconciler:
    """Mirrors locally referenced files onto a page's attachments.

    Stale remote attachments are deleted before anything is uploaded, so a
    replaced file never briefly coexists with its predecessor under the
    same name.

    Example:
        >>> reconciler = AttachmentReconciler(api, PageCache("build"))
        >>> markup = reconciler.reconcile(markup, document, "1234567890")
    """

    def __init__(self, api: APIWrapper, scratch: PageCache):
        """Initialize the reconciler.

        Args:
            api: Gateway used to list, upload and delete attachments
            scratch: Cache providing the scratch location for upload copies
        """
        self.api = api
        self.scratch = scratch

    def reconcile(
        self,
        markup: str,
        document: Document,
        page_id: str,
        force: bool = False,
    ) -> str:
        """Reconcile the page's attachments and rewrite the markup.

        Args:
            markup: Rendered storage markup
            document: Document the markup belongs to
            page_id: Page whose attachments are reconciled
            force: Upload every local attachment even when it matches

        Returns:
            Markup with attachment references rewritten to sanitized names

        Raises:
            ConfluenceError: If listing the remote attachments fails
        """
        local_attachments = extract_attachments(markup, document)
        remote_attachments = [
            RemoteAttachment.from_api(data)
            for data in self.api.get_attachments(page_id)
        ]

        matched_remote_ids = set()
        for local in local_attachments:
            for remote in remote_attachments:
                if remote.title == local.remote_name and remote.size == local.size:
                    local.remote_id = remote.attachment_id
                    matched_remote_ids.add(remote.attachment_id)
                    break

        for remote in remote_attachments:
            if remote.attachment_id not in matched_remote_ids:
                self.api.delete_attachment(remote.attachment_id, remote.title)

        for local in local_attachments:
            if local.remote_id is None or force:
                self._upload(local, page_id)
            else:
                logger.debug(f"Attachment {local.remote_name} is up to date")

        return rewrite_attachment_references(markup)

    def _upload(self, attachment: LocalAttachment, page_id: str) -> None:
        """Upload one attachment through a sanitized scratch copy."""
        scratch_path = self.scratch.scratch_path(attachment.remote_name)
        try:
            shutil.copyfile(attachment.absolute_path, scratch_path)
            logger.info(f"Uploading attachment {attachment.remote_name} to page {page_id}")
            self.api.upload_attachment(scratch_path, page_id)
        except OSError as e:
            logger.error(f"Failed to stage attachment {attachment.absolute_path}: {e}")
        finally:
            if os.path.exists(scratch_path):
                os.unlink(scratch_path)
