"""
Link Discovery Service
Breadth-first, depth-bounded crawl of the markdown documents reachable by
links from a root document, on disk or over HTTP.
"""

import logging
from collections import deque
from pathlib import Path
from urllib.parse import urljoin, urlsplit

import aiofiles

from mdox.core.link_resolver import LinkResolver, is_markdown_locator, split_fragment
from mdox.core.models import LinkedDocument, LinkKind
from mdox.exceptions import DiscoveryError, MdoxError
from mdox.interfaces.service_interfaces import IDiscoveryService, IRemoteFetchService
from mdox.services.markdown_extensions import scan_markdown

logger = logging.getLogger(__name__)


def resolve_local_link(href: str, base_dir: Path) -> Path | None:
    """Canonical path of a local markdown link target, or None if it is not one."""
    if LinkResolver.classify(href) is not LinkKind.RELATIVE:
        return None
    link_path, _ = split_fragment(href)
    if not link_path:
        return None
    try:
        resolved = (base_dir / link_path).resolve(strict=True)
    except (OSError, RuntimeError):
        return None
    return resolved if is_markdown_locator(str(resolved)) else None


def resolve_remote_link(href: str, base_url: str) -> str | None:
    """
    Absolute URL of a remote markdown link target, or None.

    Relative links without any extension are assumed to be markdown pages.
    """
    kind = LinkResolver.classify(href)
    if kind is LinkKind.ANCHOR:
        return None
    link_path, _ = split_fragment(href)
    if not link_path:
        return None
    is_markdown = link_path.lower().endswith((".md", ".markdown"))
    extensionless_relative = kind is LinkKind.RELATIVE and "." not in link_path
    if not (is_markdown or extensionless_relative):
        return None
    return urljoin(base_url, link_path)


def _name_from_url(url: str) -> str:
    return urlsplit(url).path.rstrip("/").rsplit("/", 1)[-1] or "Untitled"


class LinkDiscoveryService(IDiscoveryService):
    """
    {
        "name": "LinkDiscoveryService",
        "version": "1.0.0",
        "description": "Depth-bounded linked-document crawl for local and remote roots.",
        "dependencies": ["aiofiles", "markdown", "IRemoteFetchService"],
        "interface": {
            "inputs": ["root: str", "max_depth: int"],
            "outputs": "list[LinkedDocument] in discovery order"
        }
    }
    Documents at `depth >= max_depth` are reported but not expanded. Each
    target is reported once, titled by its first heading (remote: first H1)
    or its file name.
    """

    def __init__(self, remote_fetch_service: IRemoteFetchService | None = None):
        self._remote = remote_fetch_service

    async def discover_local(self, root_path: str, max_depth: int) -> list[LinkedDocument]:
        root = Path(root_path)
        if not root.exists():
            raise DiscoveryError(f"File does not exist: {root_path}", root=root_path)

        root = root.resolve()
        contents: dict[Path, str | None] = {}
        discovered: list[LinkedDocument] = []
        visited = {root}
        queue = deque([(root, 0)])

        while queue:
            current, depth = queue.popleft()
            if depth >= max_depth:
                continue

            content = await self._read_local(current, contents)
            if content is None:
                continue

            for href in scan_markdown(content).links:
                target = resolve_local_link(href, current.parent)
                if target is None or target in visited:
                    continue
                visited.add(target)

                target_content = await self._read_local(target, contents)
                title = scan_markdown(target_content).title if target_content else None
                discovered.append(LinkedDocument(locator=str(target), title=title or target.name))
                queue.append((target, depth + 1))

        logger.info(f"Discovered {len(discovered)} linked documents from {root_path}")
        return discovered

    async def _read_local(self, path: Path, cache: dict[Path, str | None]) -> str | None:
        if path not in cache:
            try:
                async with aiofiles.open(path, "r", encoding="utf-8") as f:
                    cache[path] = await f.read()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Error extracting links from {path}: {e}")
                cache[path] = None
        return cache[path]

    async def discover_remote(self, root_url: str, max_depth: int) -> list[LinkedDocument]:
        if self._remote is None:
            raise DiscoveryError("Remote discovery requires a fetch service", root=root_url)

        contents: dict[str, str | None] = {}
        discovered: list[LinkedDocument] = []
        visited = {root_url}
        queue = deque([(root_url, 0)])

        while queue:
            current, depth = queue.popleft()
            if depth >= max_depth:
                continue

            content = await self._fetch_remote(current, contents)
            if content is None:
                continue

            for href in scan_markdown(content).links:
                target = resolve_remote_link(href, current)
                if target is None or target in visited:
                    continue
                visited.add(target)

                target_content = await self._fetch_remote(target, contents)
                title = scan_markdown(target_content).h1_title if target_content else None
                discovered.append(LinkedDocument(locator=target, title=title or _name_from_url(target)))
                queue.append((target, depth + 1))

        logger.info(f"Discovered {len(discovered)} linked documents from {root_url}")
        return discovered

    async def _fetch_remote(self, url: str, cache: dict[str, str | None]) -> str | None:
        if url not in cache:
            try:
                cache[url] = (await self._remote.fetch(url)).content
            except MdoxError as e:
                logger.warning(f"Error fetching {url}: {e}")
                cache[url] = None
        return cache[url]
