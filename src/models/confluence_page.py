"""Confluence page and space data models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_EDITOR = "v2"


@dataclass(frozen=True)
class Space:
    """Confluence space the pages are published into.

    Resolved once per run and shared by every document.

    Attributes:
        key: Space key (e.g., "DOCS")
        name: Human readable space name
        space_id: Numeric space id, when the API returned one
    """
    key: str
    name: str = ""
    space_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Space":
        space_id = data.get("id")
        return cls(
            key=data.get("key", ""),
            name=data.get("name", ""),
            space_id=str(space_id) if space_id is not None else None,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {"key": self.key}


@dataclass(frozen=True)
class Ancestor:
    """One entry of a page's ancestor chain."""
    id: str
    title: str = ""


@dataclass
class ConfluencePage:
    """Confluence page with storage format content.

    Represents a page fetched from the API, or a page about to be created.
    The version number is the one last fetched; an update must send it back
    incremented by exactly one or Confluence rejects it as stale.

    Attributes:
        page_id: Page id (None for a page not yet created)
        title: Page title
        body: Page content in Confluence storage format (XHTML)
        version: Version number
        ancestors: Ancestor chain, root first
        space: Space the page lives in
        editor: Editor metadata tag
    """
    page_id: Optional[str]
    title: str
    body: str
    version: int
    ancestors: List[Ancestor] = field(default_factory=list)
    space: Optional[Space] = None
    editor: str = DEFAULT_EDITOR

    @classmethod
    def blank(cls, space: Space) -> "ConfluencePage":
        """Scaffold for a page that does not exist remotely yet."""
        return cls(
            page_id=None,
            title="",
            body="",
            version=1,
            ancestors=[],
            space=space,
            editor=DEFAULT_EDITOR,
        )

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ConfluencePage":
        """Build a page from a REST API content response.

        Args:
            data: Content dict expanded with body.storage, version, ancestors,
                  space and metadata.properties.editor

        Returns:
            ConfluencePage with missing fields defaulted
        """
        body = data.get("body", {}).get("storage", {}).get("value", "")
        version = int(data.get("version", {}).get("number", 1))
        ancestors = [
            Ancestor(id=str(ancestor.get("id")), title=ancestor.get("title", ""))
            for ancestor in data.get("ancestors") or []
            if ancestor.get("id") is not None
        ]
        space_data = data.get("space")
        editor = (
            data.get("metadata", {})
            .get("properties", {})
            .get("editor", {})
            .get("value", DEFAULT_EDITOR)
        )
        page_id = data.get("id")
        return cls(
            page_id=str(page_id) if page_id is not None else None,
            title=data.get("title", ""),
            body=body,
            version=version,
            ancestors=ancestors,
            space=Space.from_api(space_data) if space_data else None,
            editor=editor,
        )

    def prepare_update(self, title: str, body: str, ancestor_id: Optional[str]) -> None:
        """Fill in the content to push and bump the version by one.

        Args:
            title: Page title
            body: Storage format markup
            ancestor_id: Parent page id, or None for a top-level page
        """
        self.title = title
        self.body = body
        self.ancestors = [Ancestor(id=ancestor_id)] if ancestor_id else []
        self.version += 1
        self.editor = DEFAULT_EDITOR

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the REST content representation.

        Only the immediate parent is sent as ancestor, and the version number
        is string encoded.
        """
        payload: Dict[str, Any] = {
            "title": self.title,
            "type": "page",
            "body": {
                "storage": {
                    "value": self.body,
                    "representation": "storage",
                }
            },
            "version": {"number": str(self.version)},
            "ancestors": [{"id": self.ancestors[-1].id}] if self.ancestors else [],
            "metadata": {
                "properties": {
                    "editor": {"value": self.editor},
                }
            },
        }
        if self.space is not None:
            payload["space"] = self.space.to_payload()
        return payload
