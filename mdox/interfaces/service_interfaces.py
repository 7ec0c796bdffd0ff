"""
Service Interfaces

Defines abstract interfaces for the collaborators the session core depends on,
following the Dependency Inversion Principle (DIP). The core never touches the
filesystem, the network or the UI toolkit directly; it only talks to these.
"""

from abc import ABC, abstractmethod
from typing import Any

from mdox.core.models import FetchedContent, LinkedDocument


class IContentStore(ABC):
    """
    Local document storage interface.

    Read/write/resolve are used by the session core; the directory operations
    serve the surrounding file-tree UI.
    """

    @abstractmethod
    async def read(self, locator: str) -> str:
        """Read document content. Raises DocumentNotFoundError."""
        pass

    @abstractmethod
    async def write(self, locator: str, content: str) -> None:
        """Persist document content. Raises FileAccessError."""
        pass

    @abstractmethod
    async def resolve_path(self, base: str, relative: str) -> str:
        """Resolve a path relative to a document. Raises PathResolutionError."""
        pass

    @abstractmethod
    async def pick_save_location(self, suggested: str | None = None) -> str | None:
        """Ask the user for a destination; None when cancelled."""
        pass

    @abstractmethod
    async def list_directory(self, directory: str) -> list[dict[str, Any]]:
        """List markdown files and sub-directories."""
        pass

    @abstractmethod
    async def create_file(self, path: str, content: str = "") -> str:
        """Create a new file and return its path."""
        pass

    @abstractmethod
    async def create_directory(self, path: str) -> str:
        """Create a new directory and return its path."""
        pass

    @abstractmethod
    async def delete_path(self, path: str) -> None:
        """Delete a file or directory."""
        pass

    @abstractmethod
    async def rename_path(self, path: str, new_path: str) -> str:
        """Rename a file or directory and return the new path."""
        pass


class IRenderService(ABC):
    """Markdown to HTML rendering interface."""

    @abstractmethod
    async def render(self, content: str, base_path: str | None = None) -> str:
        """
        Render markdown to HTML. Raises RenderError.

        Heading ids must be produced with `normalize_anchor_id`.
        """
        pass


class IRemoteFetchService(ABC):
    """Remote document fetching interface."""

    @abstractmethod
    async def fetch(self, url: str) -> FetchedContent:
        """Fetch a remote document. Raises NetworkError."""
        pass


class IDiscoveryService(ABC):
    """Depth-bounded linked-document crawl interface."""

    @abstractmethod
    async def discover_local(
        self, root_path: str, max_depth: int
    ) -> list[LinkedDocument]:
        """Crawl links outward from a local markdown file."""
        pass

    @abstractmethod
    async def discover_remote(
        self, root_url: str, max_depth: int
    ) -> list[LinkedDocument]:
        """Crawl links outward from a remote markdown document."""
        pass


class IUserPrompt(ABC):
    """Blocking user interaction interface (dialogs)."""

    @abstractmethod
    async def confirm(self, message: str) -> bool:
        """Ask a yes/no question."""
        pass

    @abstractmethod
    async def alert(self, message: str) -> None:
        """Show a blocking alert."""
        pass


class IScrollablePane(ABC):
    """Capability of a pane that can be told to scroll to a percentage."""

    @abstractmethod
    def scroll_to_percentage(self, percentage: float, generation: int) -> None:
        """
        Scroll to `percentage` of the scrollable range.

        Scroll events caused by this command must be reported back with the
        same `generation` so the coordinator can recognise them as echoes.
        """
        pass


class IPersistencePort(ABC):
    """Process-wide persisted settings (recent files, theme, root directory)."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, persist: bool = False) -> None:
        """Set a setting value, optionally persisting it."""
        pass
