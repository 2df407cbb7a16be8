"""Pytest configuration and fixtures for integration tests.

Provides an in-memory stand-in for APIWrapper that keeps pages and
attachments in dictionaries and enforces Confluence's version rule.
"""

import os
from typing import Any, Dict, List, Optional

import pytest

from src.confluence_client.errors import APIAccessError, PageNotFoundError
from src.content_converter.renderer import MarkupRenderer


class ParagraphRenderer(MarkupRenderer):
    """Renders each non-empty markdown line as one paragraph."""

    def render(self, source, options):
        lines = [line.strip() for line in source.markdown.splitlines() if line.strip()]
        return "".join(f"<p>{line}</p>" for line in lines)


class InMemoryConfluence:
    """Gateway double backed by dictionaries.

    Implements the APIWrapper methods the publisher uses. Every call is
    appended to `calls` as (method, first_argument).
    """

    def __init__(self, space_key: str = "DOCS"):
        self.space_key = space_key
        self.pages: Dict[str, Dict[str, Any]] = {}
        self.attachments: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self._next_id = 1000

    def _new_id(self) -> str:
        self._next_id += 1
        return str(self._next_id)

    def add_page(self, page_id: str, title: str, body: str, version: int = 1,
                 ancestors: Optional[List[Dict[str, str]]] = None) -> None:
        self.pages[page_id] = {
            "id": page_id,
            "title": title,
            "body": {"storage": {"value": body, "representation": "storage"}},
            "version": {"number": version},
            "ancestors": ancestors or [],
            "space": {"key": self.space_key, "name": "Documentation"},
        }

    def body(self, page_id: str) -> str:
        return self.pages[page_id]["body"]["storage"]["value"]

    def version(self, page_id: str) -> int:
        return self.pages[page_id]["version"]["number"]

    def page_url(self, page_id: str) -> str:
        return f"https://wiki.example.com/pages/viewpage.action?pageId={page_id}"

    def get_space(self, space_key: str) -> Optional[Dict[str, Any]]:
        self.calls.append(("get_space", space_key))
        if space_key != self.space_key:
            return None
        return {"id": 98305, "key": space_key, "name": "Documentation"}

    def search_pages_by_title(self, title: str, space_key: Optional[str] = None) -> List[Dict[str, Any]]:
        self.calls.append(("search_pages_by_title", title))
        return [page for page in self.pages.values() if page["title"] == title]

    def get_page(self, page_id: str) -> Dict[str, Any]:
        self.calls.append(("get_page", page_id))
        if page_id not in self.pages:
            raise PageNotFoundError(page_id)
        return self.pages[page_id]

    def _ancestors(self, payload: Dict[str, Any]) -> List[Dict[str, str]]:
        ancestors = []
        for ancestor in payload.get("ancestors", []):
            parent = self.pages.get(ancestor["id"])
            ancestors.extend(parent["ancestors"] if parent else [])
            ancestors.append({"id": ancestor["id"], "title": parent["title"] if parent else ""})
        return ancestors

    def create_page(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("create_page", payload["title"]))
        page_id = self._new_id()
        self.add_page(
            page_id,
            payload["title"],
            payload["body"]["storage"]["value"],
            version=int(payload["version"]["number"]),
            ancestors=self._ancestors(payload),
        )
        return self.pages[page_id]

    def update_page(self, page_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("update_page", page_id))
        version = int(payload["version"]["number"])
        if version != self.version(page_id) + 1:
            raise APIAccessError(f"Version conflict updating page {page_id}")
        self.add_page(
            page_id,
            payload["title"],
            payload["body"]["storage"]["value"],
            version=version,
            ancestors=self._ancestors(payload),
        )
        return self.pages[page_id]

    def get_attachments(self, page_id: str) -> List[Dict[str, Any]]:
        self.calls.append(("get_attachments", page_id))
        return list(self.attachments.get(page_id, []))

    def upload_attachment(self, file_path: str, page_id: str) -> bool:
        self.calls.append(("upload_attachment", os.path.basename(file_path)))
        self.attachments.setdefault(page_id, []).append({
            "id": f"att{self._new_id()}",
            "title": os.path.basename(file_path),
            "extensions": {"fileSize": os.path.getsize(file_path)},
        })
        return True

    def delete_attachment(self, attachment_id: str, title: str = "") -> bool:
        self.calls.append(("delete_attachment", title))
        for page_id, attachments in self.attachments.items():
            self.attachments[page_id] = [a for a in attachments if a["id"] != attachment_id]
        return True

    def called(self, method: str) -> List[Any]:
        return [argument for name, argument in self.calls if name == method]


@pytest.fixture
def confluence():
    return InMemoryConfluence()


@pytest.fixture
def renderer():
    return ParagraphRenderer()


@pytest.fixture
def workspace(tmp_path):
    """Documentation tree with a configuration file.

    docs/confluence-publish.yaml
    docs/setup.md           (title from heading, one image)
    docs/images/a.png
    docs/notes.md           (explicit page id 555)
    """
    docs = tmp_path / "docs"
    (docs / "images").mkdir(parents=True)
    (docs / "images" / "a.png").write_bytes(b"\x89PNG!")
    (docs / "setup.md").write_text(
        "# Setup Guide\n"
        "Install it.\n"
        '<ac:image><ri:attachment ri:filename="images/a.png" /></ac:image>\n',
        encoding="utf-8",
    )
    (docs / "notes.md").write_text("Release notes.\n", encoding="utf-8")
    (docs / "confluence-publish.yaml").write_text(
        "space_key: DOCS\n"
        "default_parent_page_id: '100'\n"
        "pages:\n"
        "  - file: setup.md\n"
        "  - file: notes.md\n"
        "    title: Release Notes\n"
        "    page_id: '555'\n",
        encoding="utf-8",
    )
    return docs
