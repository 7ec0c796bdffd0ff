"""
Navigation History
Linear, cursor-based browsing history with back/forward support.

Pushing after one or more `back()` calls truncates the forward branch; the
history is a trail, never a tree.
"""

import logging

logger = logging.getLogger(__name__)


class NavigationHistoryStack:
    """
    {
        "name": "NavigationHistoryStack",
        "version": "1.0.0",
        "description": "Cursor-based browsing history with destructive overwrite.",
        "dependencies": [],
        "interface": {
            "inputs": ["locator: str"],
            "outputs": "Back/forward navigation targets"
        }
    }
    Invariant: -1 <= cursor < len(entries), and cursor == -1 iff entries is empty.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []
        self._cursor = -1

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> str | None:
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    @property
    def can_go_back(self) -> bool:
        return self._cursor > 0

    @property
    def can_go_forward(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def push(self, locator: str) -> None:
        """
        Record a visit to `locator`.

        A push equal to the current entry is ignored. Otherwise every entry
        after the cursor is discarded before appending.
        """
        if self.current == locator:
            logger.debug(f"History push ignored, already at {locator}")
            return

        del self._entries[self._cursor + 1:]
        self._entries.append(locator)
        self._cursor = len(self._entries) - 1
        logger.debug(f"History push: {locator} (cursor={self._cursor})")

    def back(self) -> str | None:
        """Move the cursor back one entry and return it, or None at the start."""
        if not self.can_go_back:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def forward(self) -> str | None:
        """Move the cursor forward one entry and return it, or None at the end."""
        if not self.can_go_forward:
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def peek_back(self) -> str | None:
        """Entry `back()` would return, without moving the cursor."""
        return self._entries[self._cursor - 1] if self.can_go_back else None

    def peek_forward(self) -> str | None:
        """Entry `forward()` would return, without moving the cursor."""
        return self._entries[self._cursor + 1] if self.can_go_forward else None

    def move_to(self, index: int) -> str:
        """Place the cursor on `index` without changing the entries."""
        if not 0 <= index < len(self._entries):
            raise IndexError(f"History index out of range: {index}")
        self._cursor = index
        return self._entries[index]

    def clear(self) -> None:
        self._entries.clear()
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._entries)
