"""
View State Manager
This module provides the presentation-facing state tree of the viewer using observers.
Controllers are its only writers; widgets subscribe to the paths they render.
Key Features:
- Centralized state storage with nested path support
- Observer pattern for state change notifications (wildcards supported)
- Bounded change history for debugging
"""

import copy
import logging
import re
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class StateChangeType(Enum):
    """Types of state changes for granular observation."""

    SET = "set"
    DELETE = "delete"
    RESET = "reset"


class StateManager:
    """
    {
        "name": "StateManager",
        "version": "1.0.0",
        "description": "View state tree with observer pattern.",
        "dependencies": [],
        "interface": {
            "inputs": ["path: str", "value: Any", "notify: bool"],
            "outputs": "Centralized view state with change notifications"
        }
    }
    State manager that provides unified read access to the session, navigation
    and discovery state for reactive UI updates. One instance is created per
    window and injected into the controllers.
    """

    # Constants
    MAX_HISTORY_SIZE = 100  # Maximum number of state changes to keep in history

    def __init__(self) -> None:
        """Initialize state manager with default view state."""
        self._state: dict[str, Any] = self._get_default_state()
        # Observer registry: path -> list of callbacks
        self._observers: dict[str, list[Callable]] = {}
        # State change history for debugging
        self._change_history: list[dict[str, Any]] = []
        logger.info("StateManager initialized with default view state")

    def get_state(self, path: str | None = None, default: Any = None) -> Any:
        """
        Get state value using dot-separated path notation.
        Args:
            path: Dot-separated state path (e.g., 'document.dirty').
                  If None, returns entire state tree.
            default: Default value to return if path doesn't exist
        Returns:
            State value at the specified path, or default if path doesn't exist
        Examples:
            get_state('navigation.can_go_back') -> Boolean back-button state
            get_state('discovery.linked_documents', []) -> Linked documents
        """
        if path is None:
            return self._state
        value = self._get_nested_value(self._state, path)
        return default if value is None else value

    def set_state(self, path: str, value: Any, notify: bool = True) -> bool:
        """
        Set state value at the specified path with optional change notification.
        Args:
            path: Dot-separated state path to set
            value: Value to set at the path
            notify: Whether to notify observers of the change
        Returns:
            True if the stored value changed, False otherwise
        """
        old_value = self._get_nested_value(self._state, path)
        if old_value == value and old_value is not None:
            return False

        self._set_nested_value(self._state, path, value)
        self._record_change(path, old_value, value, StateChangeType.SET)
        logger.debug(f"State set: {path} = {value!r}")

        if notify:
            self._notify_observers(path, value, old_value, StateChangeType.SET)
        return True

    def update(self, values: dict[str, Any], notify: bool = True) -> None:
        """Set several paths at once; observers fire per changed path."""
        for path, value in values.items():
            self.set_state(path, value, notify)

    def delete_state(self, path: str, notify: bool = True) -> bool:
        """
        Delete state value at the specified path.
        Returns:
            True if a value was deleted, False otherwise
        """
        old_value = self._get_nested_value(self._state, path)
        if old_value is None:
            return False

        self._delete_nested_value(self._state, path)
        self._record_change(path, old_value, None, StateChangeType.DELETE)
        logger.debug(f"State deleted: {path}")

        if notify:
            self._notify_observers(path, None, old_value, StateChangeType.DELETE)
        return True

    def subscribe(
        self, path: str, callback: Callable[[str, Any, Any, StateChangeType], None]
    ) -> None:
        """
        Subscribe to state changes at a specific path.
        Args:
            path: State path to observe (supports wildcards, e.g. 'document.*')
            callback: Function called when state changes (path, new_val, old_val, type)
        """
        self._observers.setdefault(path, []).append(callback)
        logger.debug(f"Added observer for path '{path}': {getattr(callback, '__name__', callback)}")

    def unsubscribe(self, path: str, callback: Callable) -> None:
        if path in self._observers and callback in self._observers[path]:
            self._observers[path].remove(callback)
            logger.debug(f"Removed observer for path '{path}'")

    def _record_change(
        self, path: str, old_value: Any, new_value: Any, change_type: StateChangeType
    ) -> None:
        self._change_history.append(
            {
                "timestamp": datetime.now(),
                "path": path,
                "old_value": old_value,
                "new_value": new_value,
                "change_type": change_type,
            }
        )
        # Keep history limited to last MAX_HISTORY_SIZE changes
        if len(self._change_history) > self.MAX_HISTORY_SIZE:
            self._change_history.pop(0)

    def _get_nested_value(self, state_dict: dict[str, Any], path: str) -> Any:
        """Get value from nested dictionary using dot notation."""
        current: Any = state_dict
        for key in path.split("."):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return None
        return current

    def _set_nested_value(self, state_dict: dict[str, Any], path: str, value: Any) -> None:
        """Set value in nested dictionary using dot notation."""
        keys = path.split(".")
        current = state_dict
        # Navigate to the parent of the target key
        for key in keys[:-1]:
            current = current.setdefault(key, {})
        current[keys[-1]] = value

    def _delete_nested_value(self, state_dict: dict[str, Any], path: str) -> None:
        """Delete value from nested dictionary using dot notation."""
        keys = path.split(".")
        current = state_dict
        for key in keys[:-1]:
            if key not in current:
                return  # Path doesn't exist
            current = current[key]
        current.pop(keys[-1], None)

    def _safe_notify_observer(
        self,
        observer: Callable,
        path: str,
        new_value: Any,
        old_value: Any,
        change_type: StateChangeType,
    ) -> None:
        """Notify a single observer; a failing widget must not break the writer."""
        try:
            observer(path, new_value, old_value, change_type)
        except Exception as e:
            logger.error(f"Error notifying observer {getattr(observer, '__name__', observer)}: {e}")

    def _notify_observers(
        self, path: str, new_value: Any, old_value: Any, change_type: StateChangeType
    ) -> None:
        """
        Notify all relevant observers of state changes.
        Exact-path observers first, then wildcard observers
        (e.g., 'document.*' matches 'document.dirty').
        """
        for observer in list(self._observers.get(path, [])):
            self._safe_notify_observer(observer, path, new_value, old_value, change_type)

        for observer_path, observers in list(self._observers.items()):
            if "*" in observer_path:
                pattern = re.escape(observer_path).replace(r"\*", ".*")
                if re.fullmatch(pattern, path):
                    for observer in list(observers):
                        self._safe_notify_observer(
                            observer, path, new_value, old_value, change_type
                        )

    def reset_state(self, section: str | None = None) -> None:
        """
        Reset state to defaults.
        Args:
            section: Optional section to reset (e.g., 'discovery'). If None, resets all.
        """
        defaults = self._get_default_state()
        if section:
            if section in self._state:
                old_state = copy.deepcopy(self._state[section])
                self._state[section] = defaults[section]
                self._notify_observers(
                    section, self._state[section], old_state, StateChangeType.RESET
                )
                logger.info(f"Reset state section: {section}")
        else:
            old_state = copy.deepcopy(self._state)
            self._state = defaults
            self._notify_observers("__all__", self._state, old_state, StateChangeType.RESET)
            logger.info("Reset all view state")

    def _get_default_state(self) -> dict[str, Any]:
        """Get default view state structure."""
        return {
            "document": {
                "locator": None,
                "display_locator": None,
                "is_remote": False,
                "dirty": False,
                "mode": "view",
                "rendered_html": "",
            },
            "navigation": {
                "can_go_back": False,
                "can_go_forward": False,
            },
            "discovery": {
                "root": None,
                "linked_documents": [],
                "is_loading": False,
            },
            "ui": {
                "is_loading": False,
                "last_error": None,
                "recent_files": [],
                "theme": "light",
            },
        }

    def get_change_history(self, limit: int = 10) -> list[dict[str, Any]]:
        """Get recent state change history for debugging."""
        return self._change_history[-limit:] if limit > 0 else self._change_history

    def get_state_summary(self) -> dict[str, Any]:
        """Get summary of current state for debugging."""
        return {
            "total_observers": sum(len(obs) for obs in self._observers.values()),
            "change_history_size": len(self._change_history),
            "state_sections": list(self._state.keys()),
            "last_changes": self.get_change_history(5),
        }
