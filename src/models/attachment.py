"""Attachment data models."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class LocalAttachment:
    """A file referenced by rendered markup and present on disk.

    Attributes:
        original_path: Filename as referenced in the markup
        absolute_path: Path resolved against the document's directory
        size: Byte size on disk
        remote_name: Sanitized flat filename used on Confluence
        remote_id: Id of the matching remote attachment (None if unmatched)
    """
    original_path: str
    absolute_path: str
    size: int
    remote_name: str
    remote_id: Optional[str] = None


@dataclass(frozen=True)
class RemoteAttachment:
    """An attachment listed on a Confluence page."""
    attachment_id: str
    title: str
    size: int

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteAttachment":
        return cls(
            attachment_id=str(data.get("id")),
            title=data.get("title", ""),
            size=int(data.get("extensions", {}).get("fileSize", -1)),
        )
