"""
Session Models
Data models describing the document currently shown by the viewer/editor.
These are pure data classes without business logic.
"""

from dataclasses import dataclass, replace
from enum import Enum


class Mode(Enum):
    """Display mode of the current document."""

    VIEW = "view"
    EDIT = "edit"
    EDIT_SPLIT = "edit_split"

    @property
    def is_editing(self) -> bool:
        return self is not Mode.VIEW


class LinkKind(Enum):
    """Classification of a navigation target found in rendered content."""

    ANCHOR = "anchor"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


@dataclass(frozen=True)
class DocumentIdentity:
    """
    {
        "name": "DocumentIdentity",
        "version": "1.0.0",
        "description": "Canonical address of the document used for I/O.",
        "dependencies": [],
        "interface": {
            "inputs": ["locator", "is_remote", "display_locator"],
            "outputs": "Immutable document identity"
        }
    }
    `locator` is the resolved path or URL used for I/O. `display_locator` holds a
    user-facing alias (e.g. a GitHub repository URL) when it differs from the
    canonical address the content was fetched from.
    """

    locator: str
    is_remote: bool = False
    display_locator: str | None = None

    @property
    def label(self) -> str:
        """Locator to show to the user."""
        return self.display_locator or self.locator


@dataclass
class DocumentSession:
    """
    Pure data model for the document currently displayed.

    `dirty` mirrors `edited_content != original_content`; the session
    controller recomputes it on every edit and clears it on load or save.
    """

    identity: DocumentIdentity | None = None
    original_content: str = ""
    edited_content: str = ""
    rendered_html: str = ""
    dirty: bool = False
    mode: Mode = Mode.VIEW

    def snapshot(self) -> "DocumentSession":
        """Return an independent copy for the presentation layer."""
        return replace(self)


@dataclass(frozen=True)
class LinkedDocument:
    """A document reachable by links from the current root document."""

    locator: str
    title: str


@dataclass(frozen=True)
class FetchedContent:
    """Result of a remote fetch: the body and the URL it was served from."""

    content: str
    canonical_url: str
