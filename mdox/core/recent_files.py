"""
Recent Files
Most-recent-first list of root documents, persisted across restarts through
the persistence port.
"""

import logging

import config
from mdox.core.config_manager import ConfigManager

logger = logging.getLogger(__name__)


class RecentFilesList:
    """De-duplicated, capacity-bounded list of recently opened root documents."""

    def __init__(
        self,
        config_manager: ConfigManager,
        capacity: int | None = None,
        settings_key: str | None = None,
    ):
        self._config = config_manager
        self._capacity = capacity or config.RECENT_FILES_SETTINGS["capacity"]
        self._key = settings_key or config.RECENT_FILES_SETTINGS["settings_key"]
        self._items = self._config.get_list(self._key)[: self._capacity]

    @property
    def items(self) -> list[str]:
        return list(self._items)

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, locator: str) -> None:
        """Move `locator` to the front, evicting the oldest entry past capacity."""
        self._items = [locator] + [item for item in self._items if item != locator]
        del self._items[self._capacity:]
        self._persist()

    def remove(self, locator: str) -> None:
        if locator in self._items:
            self._items.remove(locator)
            self._persist()

    def clear(self) -> None:
        self._items = []
        self._persist()

    def _persist(self) -> None:
        self._config.set(self._key, list(self._items), persist=True)
        logger.debug(f"Recent files persisted ({len(self._items)} entries)")

    def __contains__(self, locator: object) -> bool:
        return locator in self._items

    def __len__(self) -> int:
        return len(self._items)
