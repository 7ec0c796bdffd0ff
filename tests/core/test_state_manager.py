"""Tests for the view state tree and its observers."""

from unittest.mock import Mock

from mdox.core.state_manager import StateChangeType, StateManager


class TestStateManager:
    def setup_method(self):
        self.state = StateManager()

    def test_default_state(self):
        assert self.state.get_state("document.locator") is None
        assert self.state.get_state("document.mode") == "view"
        assert self.state.get_state("navigation.can_go_back") is False
        assert self.state.get_state("discovery.linked_documents") == []
        assert self.state.get_state("ui.last_error") is None

    def test_get_with_default(self):
        assert self.state.get_state("missing.path", "fallback") == "fallback"

    def test_set_state_notifies_exact_observer(self):
        observer = Mock()
        self.state.subscribe("document.dirty", observer)

        assert self.state.set_state("document.dirty", True)

        observer.assert_called_once_with("document.dirty", True, False, StateChangeType.SET)

    def test_unchanged_value_does_not_notify(self):
        observer = Mock()
        self.state.set_state("document.locator", "/a.md")
        self.state.subscribe("document.locator", observer)

        assert not self.state.set_state("document.locator", "/a.md")
        observer.assert_not_called()

    def test_wildcard_observer(self):
        observer = Mock()
        self.state.subscribe("navigation.*", observer)

        self.state.update({"navigation.can_go_back": True, "document.dirty": True})

        observer.assert_called_once_with("navigation.can_go_back", True, False, StateChangeType.SET)

    def test_failing_observer_does_not_break_writer(self):
        failing = Mock(side_effect=RuntimeError("widget gone"))
        healthy = Mock()
        self.state.subscribe("ui.is_loading", failing)
        self.state.subscribe("ui.is_loading", healthy)

        self.state.set_state("ui.is_loading", True)

        healthy.assert_called_once()
        assert self.state.get_state("ui.is_loading") is True

    def test_unsubscribe(self):
        observer = Mock()
        self.state.subscribe("ui.theme", observer)
        self.state.unsubscribe("ui.theme", observer)

        self.state.set_state("ui.theme", "dark")

        observer.assert_not_called()

    def test_delete_state(self):
        self.state.set_state("document.locator", "/a.md")

        assert self.state.delete_state("document.locator")
        assert not self.state.delete_state("document.locator")

    def test_reset_section(self):
        self.state.set_state("discovery.root", "/a.md")
        self.state.reset_state("discovery")

        assert self.state.get_state("discovery.root") is None

    def test_change_history_is_bounded(self):
        for i in range(StateManager.MAX_HISTORY_SIZE + 5):
            self.state.set_state("document.rendered_html", f"<p>{i}</p>")

        assert len(self.state.get_change_history(0)) == StateManager.MAX_HISTORY_SIZE
        assert self.state.get_change_history(1)[0]["new_value"] == f"<p>{StateManager.MAX_HISTORY_SIZE + 4}</p>"
