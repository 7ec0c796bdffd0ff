"""
Link Resolver
Classifies and normalizes navigation targets found in rendered documents:
same-page anchors, absolute URLs and paths relative to the current document.
"""

import logging
import re
from urllib.parse import urljoin, urlsplit

from mdox.core.models import LinkKind
from mdox.exceptions import LinkResolutionError, MdoxError
from mdox.interfaces.service_interfaces import IContentStore

logger = logging.getLogger(__name__)

# Two or more characters so that Windows drive letters ("C:\docs") stay relative
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+:")
_ANCHOR_DISALLOWED = re.compile(r"[^a-z0-9\-_\s]")
_WHITESPACE_RUN = re.compile(r"\s+")
_REMOTE_SCHEMES = ("http", "https")
_MARKDOWN_SUFFIXES = (".md", ".markdown")


def normalize_anchor_id(raw: str) -> str:
    """
    Convert heading text or an anchor href into a heading id.

    The render service assigns heading ids with this exact function, so an
    anchor click and the heading it targets always agree.

    Examples:
        normalize_anchor_id("#Hello, World!") -> "hello-world"
        normalize_anchor_id("Getting Started") -> "getting-started"
    """
    text = raw[1:] if raw.startswith("#") else raw
    text = _ANCHOR_DISALLOWED.sub(" ", text.lower()).strip()
    return _WHITESPACE_RUN.sub("-", text)


def is_remote_locator(locator: str) -> bool:
    """True for http(s) URLs, the only absolute targets the viewer can fetch."""
    return urlsplit(locator).scheme.lower() in _REMOTE_SCHEMES


def is_markdown_locator(locator: str) -> bool:
    path = urlsplit(locator).path if is_remote_locator(locator) else locator
    return path.lower().endswith(_MARKDOWN_SUFFIXES)


def split_fragment(href: str) -> tuple[str, str | None]:
    """Split "guide.md#setup" into ("guide.md", "setup")."""
    path, sep, fragment = href.partition("#")
    return path, (fragment if sep and fragment else None)


class LinkResolver:
    """
    {
        "name": "LinkResolver",
        "version": "1.0.0",
        "description": "Classifies, normalizes and resolves in-document links.",
        "dependencies": ["IContentStore"],
        "interface": {
            "inputs": ["href: str", "base_locator: str", "is_remote_base: bool"],
            "outputs": "Link kind, heading ids and resolved locators"
        }
    }
    Local relative paths are resolved by the content store, which understands
    filesystem semantics ("..", "./", sibling traversal); remote ones use
    standard URL joining.
    """

    normalize_anchor_id = staticmethod(normalize_anchor_id)

    def __init__(self, content_store: IContentStore):
        self._content_store = content_store

    @staticmethod
    def classify(href: str) -> LinkKind:
        if href.startswith("#"):
            return LinkKind.ANCHOR
        if _SCHEME_PATTERN.match(href):
            return LinkKind.ABSOLUTE
        return LinkKind.RELATIVE

    async def resolve(
        self, base_locator: str, relative_href: str, is_remote_base: bool
    ) -> str:
        """
        Resolve `relative_href` against the document at `base_locator`.

        Raises:
            LinkResolutionError: If the target cannot be resolved
        """
        if is_remote_base:
            try:
                return urljoin(base_locator, relative_href)
            except ValueError as e:
                raise LinkResolutionError(
                    f"Failed to resolve link '{relative_href}': {e}",
                    href=relative_href,
                    base_locator=base_locator,
                ) from e

        try:
            resolved = await self._content_store.resolve_path(
                base_locator, relative_href
            )
        except (MdoxError, OSError) as e:
            raise LinkResolutionError(
                f"Failed to resolve link '{relative_href}': {e}",
                href=relative_href,
                base_locator=base_locator,
            ) from e

        logger.debug(f"Resolved '{relative_href}' against {base_locator}: {resolved}")
        return resolved
