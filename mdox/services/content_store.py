"""
Local Content Store
Filesystem-backed document storage used for opening, saving and resolving
relative links, plus the directory operations behind the file tree.
"""

import asyncio
import logging
import shutil
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import aiofiles

from mdox.exceptions import DocumentNotFoundError, FileAccessError, PathResolutionError
from mdox.interfaces.service_interfaces import IContentStore

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = {".md", ".markdown", ".mdown", ".mkd"}

SaveLocationPicker = Callable[[str | None], Awaitable[str | None]]


class LocalContentStore(IContentStore):
    """
    {
        "name": "LocalContentStore",
        "version": "1.0.0",
        "description": "Async filesystem access for markdown documents.",
        "dependencies": ["aiofiles"],
        "interface": {
            "inputs": ["locator: str", "content: str"],
            "outputs": "Document content and resolved paths"
        }
    }
    The save-location picker is injected by the UI layer (a file dialog);
    without one, Save As is treated as cancelled.
    """

    def __init__(self, save_location_picker: SaveLocationPicker | None = None):
        self._picker = save_location_picker

    async def read(self, locator: str) -> str:
        path = Path(locator)
        if not path.exists():
            raise DocumentNotFoundError(f"File not found: {locator}", path=locator)
        if not path.is_file():
            raise DocumentNotFoundError(f"Path is not a file: {locator}", path=locator)

        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileAccessError(
                f"Failed to read file: {e}", path=locator, access_type="read"
            ) from e

        logger.debug(f"Read {len(content)} chars from {locator}")
        return content

    async def write(self, locator: str, content: str) -> None:
        try:
            async with aiofiles.open(locator, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            raise FileAccessError(
                f"Failed to write file: {e}", path=locator, access_type="write"
            ) from e
        logger.info(f"Saved {len(content)} chars to {locator}")

    async def resolve_path(self, base: str, relative: str) -> str:
        """
        Resolve `relative` against the directory containing `base`.

        The target must exist; the returned path is canonical (symlinks and
        ".." segments resolved).
        """
        base_dir = Path(base).parent
        try:
            resolved = (base_dir / relative).resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise PathResolutionError(
                f"Failed to resolve path: {e}", base=base, relative=relative
            ) from e
        return str(resolved)

    async def pick_save_location(self, suggested: str | None = None) -> str | None:
        if self._picker is None:
            logger.warning("No save location picker configured")
            return None
        return await self._picker(suggested)

    async def list_directory(self, directory: str) -> list[dict[str, Any]]:
        """
        List sub-directories and markdown files of `directory`.

        Hidden entries are skipped; directories come first, then files, each
        group sorted case-insensitively.
        """
        root = Path(directory)
        if not root.is_dir():
            raise DocumentNotFoundError(f"Directory not found: {directory}", path=directory)

        entries = await asyncio.to_thread(lambda: list(root.iterdir()))
        listing = [
            {"name": entry.name, "path": str(entry), "is_dir": entry.is_dir()}
            for entry in entries
            if not entry.name.startswith(".")
            and (entry.is_dir() or entry.suffix.lower() in MARKDOWN_EXTENSIONS)
        ]
        listing.sort(key=lambda item: (not item["is_dir"], item["name"].lower()))
        return listing

    async def create_file(self, path: str, content: str = "") -> str:
        if Path(path).exists():
            raise FileAccessError(f"File already exists: {path}", path=path, access_type="create")
        await self.write(path, content)
        return path

    async def create_directory(self, path: str) -> str:
        try:
            await asyncio.to_thread(Path(path).mkdir, parents=True, exist_ok=False)
        except OSError as e:
            raise FileAccessError(
                f"Failed to create directory: {e}", path=path, access_type="create"
            ) from e
        return path

    async def delete_path(self, path: str) -> None:
        target = Path(path)
        if not target.exists():
            raise DocumentNotFoundError(f"Path not found: {path}", path=path)
        try:
            if target.is_dir():
                await asyncio.to_thread(shutil.rmtree, target)
            else:
                await asyncio.to_thread(target.unlink)
        except OSError as e:
            raise FileAccessError(f"Failed to delete: {e}", path=path, access_type="delete") from e
        logger.info(f"Deleted {path}")

    async def rename_path(self, path: str, new_path: str) -> str:
        if Path(new_path).exists():
            raise FileAccessError(
                f"Destination already exists: {new_path}", path=path, access_type="rename"
            )
        try:
            await asyncio.to_thread(Path(path).rename, new_path)
        except OSError as e:
            raise FileAccessError(f"Failed to rename: {e}", path=path, access_type="rename") from e
        return new_path
