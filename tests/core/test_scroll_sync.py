"""Tests for split-view scroll mirroring and echo suppression."""

import pytest
from PyQt6.QtWidgets import QScrollBar

from mdox.core.scroll_sync import Pane, ScrollSyncCoordinator, scroll_percentage
from mdox.interfaces.service_interfaces import IScrollablePane
from mdox.scroll_pane import ScrollBarPane


class RecordingPane(IScrollablePane):
    def __init__(self):
        self.commands: list[tuple[float, int]] = []

    def scroll_to_percentage(self, percentage: float, generation: int) -> None:
        self.commands.append((percentage, generation))


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.parametrize(
    "top, height, client, expected",
    [
        (0, 1000, 200, 0.0),
        (400, 1000, 200, 0.5),
        (800, 1000, 200, 1.0),
        (900, 1000, 200, 1.0),
        (-10, 1000, 200, 0.0),
        (50, 200, 200, 0.0),
        (50, 100, 200, 0.0),
    ],
)
def test_scroll_percentage(top, height, client, expected):
    assert scroll_percentage(top, height, client) == expected


class TestScrollSyncCoordinator:
    def setup_method(self):
        self.clock = FakeClock()
        self.sync = ScrollSyncCoordinator(suppression_window=0.1, clock=self.clock)
        self.editor = RecordingPane()
        self.viewer = RecordingPane()
        self.sync.attach(Pane.EDITOR, self.editor)
        self.sync.attach(Pane.VIEWER, self.viewer)

    def test_disabled_by_default(self):
        assert not self.sync.enabled
        assert not self.sync.on_scroll(Pane.EDITOR, 0.5)
        assert self.viewer.commands == []

    def test_mirrors_to_other_pane(self):
        self.sync.set_enabled(True)

        assert self.sync.on_scroll(Pane.EDITOR, 0.25)
        assert self.viewer.commands == [(0.25, 1)]
        assert self.editor.commands == []

    def test_tagged_echo_is_not_mirrored_back(self):
        self.sync.set_enabled(True)
        self.sync.on_scroll(Pane.EDITOR, 0.4)
        _, generation = self.viewer.commands[-1]

        # Even after the suppression window has expired
        self.clock.now = 5.0
        assert not self.sync.on_scroll(Pane.VIEWER, 0.4, generation)
        assert self.editor.commands == []

    def test_viewer_scroll_mirrors_once_without_bounce(self):
        self.sync.set_enabled(True)

        assert self.sync.on_scroll(Pane.VIEWER, 0.3)
        self.clock.now = 0.02
        assert not self.sync.on_scroll(Pane.EDITOR, 0.3)

        assert len(self.editor.commands) == 1
        assert self.viewer.commands == []

    def test_untagged_report_from_passive_pane_dropped_inside_window(self):
        self.sync.set_enabled(True)
        self.sync.on_scroll(Pane.EDITOR, 0.4)

        self.clock.now = 0.05
        assert not self.sync.on_scroll(Pane.VIEWER, 0.41)
        assert self.editor.commands == []

    def test_passive_pane_can_drive_after_window(self):
        self.sync.set_enabled(True)
        self.sync.on_scroll(Pane.EDITOR, 0.4)

        self.clock.now = 0.2
        assert self.sync.on_scroll(Pane.VIEWER, 0.7)
        assert self.editor.commands == [(0.7, 2)]

    def test_driver_keeps_driving_inside_window(self):
        self.sync.set_enabled(True)
        self.sync.on_scroll(Pane.EDITOR, 0.1)
        self.clock.now = 0.01
        self.sync.on_scroll(Pane.EDITOR, 0.2)

        assert [pct for pct, _ in self.viewer.commands] == [0.1, 0.2]

    def test_stale_generation_from_earlier_command_is_mirrored(self):
        self.sync.set_enabled(True)
        self.sync.on_scroll(Pane.EDITOR, 0.1)
        self.clock.now = 1.0
        self.sync.on_scroll(Pane.EDITOR, 0.2)

        self.clock.now = 2.0
        assert self.sync.on_scroll(Pane.VIEWER, 0.9, 1)

    def test_percentage_is_clamped(self):
        self.sync.set_enabled(True)
        self.sync.on_scroll(Pane.EDITOR, 1.5)

        assert self.viewer.commands[-1][0] == 1.0

    def test_disable_resets_driver(self):
        self.sync.set_enabled(True)
        self.sync.on_scroll(Pane.EDITOR, 0.4)
        self.sync.set_enabled(False)
        self.sync.set_enabled(True)

        assert self.sync.on_scroll(Pane.VIEWER, 0.6)

    def test_missing_target_is_ignored(self):
        self.sync.detach(Pane.VIEWER)
        self.sync.set_enabled(True)

        assert not self.sync.on_scroll(Pane.EDITOR, 0.5)

    def test_direct_command_is_tagged(self):
        self.sync.set_enabled(True)
        self.sync.scroll_to_percentage(Pane.VIEWER, 0.3)

        percentage, generation = self.viewer.commands[-1]
        assert percentage == 0.3
        assert not self.sync.on_scroll(Pane.VIEWER, 0.3, generation)


class TestScrollBarPane:
    def test_user_scroll_is_mirrored_without_echo(self, qtbot):
        sync = ScrollSyncCoordinator(suppression_window=0)
        editor_bar = QScrollBar()
        viewer_bar = QScrollBar()
        editor_bar.setRange(0, 100)
        viewer_bar.setRange(0, 1000)
        editor = ScrollBarPane(Pane.EDITOR, editor_bar, sync)
        ScrollBarPane(Pane.VIEWER, viewer_bar, sync)
        sync.set_enabled(True)

        editor_bar.setValue(50)

        assert viewer_bar.value() == 500
        assert editor_bar.value() == 50
        assert sync.generation == 1
        assert editor.percentage() == 0.5

    def test_disabled_sync_leaves_other_bar_alone(self, qtbot):
        sync = ScrollSyncCoordinator(suppression_window=0)
        editor_bar = QScrollBar()
        viewer_bar = QScrollBar()
        editor_bar.setRange(0, 100)
        viewer_bar.setRange(0, 100)
        ScrollBarPane(Pane.EDITOR, editor_bar, sync)
        ScrollBarPane(Pane.VIEWER, viewer_bar, sync)

        editor_bar.setValue(30)

        assert viewer_bar.value() == 0
