"""
Python-Markdown Extensions

Tree processors shared by the render service and the link discovery crawl:
- HeadingIdExtension assigns heading ids with `normalize_anchor_id`
- ImageBasePathExtension makes relative image sources loadable from the viewer
- LinkCollectorExtension records link targets and the document title
"""

import html
import logging
import re
import xml.etree.ElementTree as etree
from pathlib import Path
from urllib.parse import urljoin

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import HTML_PLACEHOLDER_RE

from mdox.core.link_resolver import is_remote_locator, normalize_anchor_id

logger = logging.getLogger(__name__)

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
# Runs after the inline processor (priority 20) so image sources are final
_PRIORITY = 5
# Runs after the unescape processor (priority 0) so backslash escapes are resolved
_TEXT_PRIORITY = -5

_TAG_RE = re.compile(r"<[^>]*>")


def element_text(element: etree.Element) -> str:
    return "".join(element.itertext())


def visible_text(md: Markdown, element: etree.Element) -> str:
    """
    Text of `element` as the reader sees it.

    Inline HTML and entities are still stash placeholders at tree-processing
    time; they are restored, tags dropped and entities decoded.
    """

    def _restore(match: re.Match) -> str:
        raw = md.htmlStash.rawHtmlBlocks[int(match.group(1))]
        if isinstance(raw, str):
            return raw
        return etree.tostring(raw, encoding="unicode", method="text")

    text = HTML_PLACEHOLDER_RE.sub(_restore, element_text(element))
    return html.unescape(_TAG_RE.sub("", text))


class HeadingIdProcessor(Treeprocessor):
    def run(self, root: etree.Element) -> None:
        for element in root.iter():
            if element.tag in HEADING_TAGS and "id" not in element.attrib:
                heading_id = normalize_anchor_id(visible_text(self.md, element))
                if heading_id:
                    element.set("id", heading_id)


class HeadingIdExtension(Extension):
    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        md.treeprocessors.register(HeadingIdProcessor(md), "mdox_heading_ids", _TEXT_PRIORITY)


class ImageBasePathProcessor(Treeprocessor):
    def __init__(self, md: Markdown, base_path: str | None):
        super().__init__(md)
        self.base_path = base_path

    def run(self, root: etree.Element) -> None:
        if not self.base_path:
            return
        for image in root.iter("img"):
            src = image.get("src", "")
            if not src or src.startswith(("http://", "https://", "data:", "file://")):
                continue
            image.set("src", self._rewrite(src))

    def _rewrite(self, src: str) -> str:
        if is_remote_locator(self.base_path):
            return urljoin(self.base_path, src)

        candidate = Path(self.base_path).parent / src
        if candidate.exists():
            return candidate.resolve().as_uri()
        return src


class ImageBasePathExtension(Extension):
    def __init__(self, base_path: str | None = None, **kwargs):
        self.base_path = base_path
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        md.treeprocessors.register(
            ImageBasePathProcessor(md, self.base_path), "mdox_image_base_path", _PRIORITY
        )


class LinkCollectorProcessor(Treeprocessor):
    def __init__(self, md: Markdown, extension: "LinkCollectorExtension"):
        super().__init__(md)
        self.extension = extension

    def run(self, root: etree.Element) -> None:
        self.extension.links = [
            anchor.get("href") for anchor in root.iter("a") if anchor.get("href")
        ]
        self.extension.title = None
        self.extension.h1_title = None
        for element in root.iter():
            if element.tag not in HEADING_TAGS:
                continue
            text = visible_text(self.md, element).strip()
            if not text:
                continue
            if self.extension.title is None:
                self.extension.title = text
            if element.tag == "h1":
                self.extension.h1_title = text
                break


class LinkCollectorExtension(Extension):
    """
    Collects link hrefs in document order, the first heading (`title`) and the
    first level-one heading (`h1_title`) of the last converted document.
    """

    def __init__(self, **kwargs):
        self.links: list[str] = []
        self.title: str | None = None
        self.h1_title: str | None = None
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        md.treeprocessors.register(LinkCollectorProcessor(md, self), "mdox_link_collector", _TEXT_PRIORITY)


def scan_markdown(content: str) -> LinkCollectorExtension:
    """Parse `content` and return the collector holding its links and title."""
    collector = LinkCollectorExtension()
    Markdown(extensions=[collector]).convert(content)
    return collector
