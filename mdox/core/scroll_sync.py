"""
Scroll Synchronisation
Bidirectional, feedback-free percentage scroll mirroring between the editor
and viewer panes while both are visible (split mode).

Two mechanisms keep a mirrored scroll from bouncing back to its origin:
- every programmatic scroll carries a generation number; a pane reporting a
  scroll tagged with the generation it was last commanded with is an echo;
- untagged reports from the passive pane are dropped while the other pane
  holds the driver mark (a short suppression window).
"""

import logging
import time
from collections.abc import Callable
from enum import Enum

import config
from mdox.interfaces.service_interfaces import IScrollablePane

logger = logging.getLogger(__name__)


class Pane(Enum):
    EDITOR = "editor"
    VIEWER = "viewer"

    @property
    def other(self) -> "Pane":
        return Pane.VIEWER if self is Pane.EDITOR else Pane.EDITOR


def scroll_percentage(scroll_top: float, scroll_height: float, client_height: float) -> float:
    """Position of a pane as a fraction of its scrollable range, clamped to [0, 1]."""
    scrollable = scroll_height - client_height
    if scrollable <= 0:
        return 0.0
    return min(1.0, max(0.0, scroll_top / scrollable))


class ScrollSyncCoordinator:
    """
    {
        "name": "ScrollSyncCoordinator",
        "version": "1.0.0",
        "description": "Mirrors scroll percentage between two panes without echo loops.",
        "dependencies": ["IScrollablePane"],
        "interface": {
            "inputs": ["pane scroll events"],
            "outputs": "scroll_to_percentage commands on the passive pane"
        }
    }
    Holds non-owning references to the panes; it never manages their lifecycle.
    """

    def __init__(
        self,
        suppression_window: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            suppression_window: Seconds the driver mark is held after a mirror
            clock: Monotonic time source, injectable for tests
        """
        if suppression_window is None:
            suppression_window = config.SCROLL_SYNC_SETTINGS["suppression_ms"] / 1000
        self._window = suppression_window
        self._clock = clock
        self._targets: dict[Pane, IScrollablePane] = {}
        self._enabled = False

        self._driver: Pane | None = None
        self._driver_until = 0.0
        self._generation = 0
        # Last generation commanded on each pane
        self._issued: dict[Pane, int] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def generation(self) -> int:
        return self._generation

    def attach(self, pane: Pane, target: IScrollablePane) -> None:
        self._targets[pane] = target
        logger.debug(f"Scroll target attached for {pane.value}")

    def detach(self, pane: Pane) -> None:
        self._targets.pop(pane, None)
        self._issued.pop(pane, None)

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        self._driver = None
        self._driver_until = 0.0
        logger.debug(f"Scroll sync {'enabled' if enabled else 'disabled'}")

    def _driver_active(self) -> Pane | None:
        if self._driver is not None and self._clock() >= self._driver_until:
            self._driver = None
        return self._driver

    def on_scroll(self, source: Pane, percentage: float, generation: int | None = None) -> bool:
        """
        Handle a scroll report from `source`.

        Returns:
            True if the other pane was commanded to follow
        """
        if not self._enabled:
            return False

        if generation is not None and generation == self._issued.get(source):
            logger.debug(f"Ignoring echo from {source.value} (generation {generation})")
            return False

        if self._driver_active() is source.other:
            logger.debug(f"Ignoring {source.value} scroll inside suppression window")
            return False

        target = self._targets.get(source.other)
        if target is None:
            return False

        self._driver = source
        self._driver_until = self._clock() + self._window
        self._generation += 1
        self._issued[source.other] = self._generation

        target.scroll_to_percentage(min(1.0, max(0.0, percentage)), self._generation)
        return True

    def scroll_to_percentage(self, pane: Pane, percentage: float) -> None:
        """Command `pane` directly, tagged so its echo is not mirrored back."""
        target = self._targets.get(pane)
        if target is None:
            return
        self._generation += 1
        self._issued[pane] = self._generation
        target.scroll_to_percentage(min(1.0, max(0.0, percentage)), self._generation)
