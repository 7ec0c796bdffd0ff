"""
Qt adapter connecting a QScrollBar to the scroll sync coordinator.
"""

import logging

from PyQt6.QtWidgets import QScrollBar

from mdox.core.scroll_sync import Pane, ScrollSyncCoordinator
from mdox.interfaces.service_interfaces import IScrollablePane

logger = logging.getLogger(__name__)


class ScrollBarPane(IScrollablePane):
    """
    Reports user scrolls of `scroll_bar` to the coordinator and applies
    mirrored positions commanded by it.

    A value change caused by `scroll_to_percentage` is reported with the
    generation it was commanded with, so the coordinator recognises the echo.
    """

    def __init__(self, pane: Pane, scroll_bar: QScrollBar, coordinator: ScrollSyncCoordinator):
        self._pane = pane
        self._scroll_bar = scroll_bar
        self._coordinator = coordinator
        self._applying: int | None = None

        coordinator.attach(pane, self)
        scroll_bar.valueChanged.connect(self._on_value_changed)

    @property
    def pane(self) -> Pane:
        return self._pane

    def percentage(self) -> float:
        bar = self._scroll_bar
        span = bar.maximum() - bar.minimum()
        if span <= 0:
            return 0.0
        return (bar.value() - bar.minimum()) / span

    def scroll_to_percentage(self, percentage: float, generation: int) -> None:
        bar = self._scroll_bar
        value = bar.minimum() + round(percentage * (bar.maximum() - bar.minimum()))
        self._applying = generation
        try:
            bar.setValue(value)
        finally:
            self._applying = None

    def _on_value_changed(self, _value: int) -> None:
        self._coordinator.on_scroll(self._pane, self.percentage(), self._applying)

    def detach(self) -> None:
        self._scroll_bar.valueChanged.disconnect(self._on_value_changed)
        self._coordinator.detach(self._pane)
