"""
Unified Configuration Manager

This module provides the persistence port of the session core: a single place
for application defaults and the process-wide settings that survive restarts
(recent files, theme, root directory).

Configuration Priority (highest to lowest):
1. Runtime configuration (temporary overrides)
2. User settings (QSettings persistent storage)
3. Default configuration (from config.py)
"""

import logging
from collections.abc import Callable
from typing import Any

from PyQt6.QtCore import QSettings

import config
from mdox.interfaces.service_interfaces import IPersistencePort

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")


class ConfigManager(IPersistencePort):
    """
    {
        "name": "ConfigManager",
        "version": "1.0.0",
        "description": "Configuration and persisted settings with hierarchical precedence.",
        "dependencies": ["PyQt6.QtCore", "config"],
        "interface": {
            "inputs": ["key: str", "value: Any", "persist: bool"],
            "outputs": "Unified configuration access with observer pattern"
        }
    }

    Passed into the controllers at construction rather than reached as a global,
    so the core can be exercised against a throwaway INI file.
    """

    def __init__(self, settings: QSettings | None = None):
        """
        Initialize configuration manager.

        Args:
            settings: Backing store for persisted values; defaults to the
                      platform store for the application
        """
        # Configuration storage layers (priority order)
        self._settings = settings if settings is not None else QSettings(config.APP_NAME, "Settings")
        self._default_config = self._load_from_config_py()
        self._runtime_config: dict[str, Any] = {}

        # Observer pattern for configuration changes
        self._observers: list[Callable[[str, Any], None]] = []

        logger.info(f"ConfigManager initialized with settings file: '{self._settings.fileName()}'")

    def _load_from_config_py(self) -> dict[str, Any]:
        """Load default configuration from config.py module."""
        default_config = {
            "app": {
                "name": getattr(config, "APP_NAME", "mdox"),
                "version": getattr(config, "APP_VERSION", "0.1.0"),
            },
            "session": getattr(config, "SESSION_SETTINGS", {}),
            "discovery": getattr(config, "DISCOVERY_SETTINGS", {}),
            "scroll_sync": getattr(config, "SCROLL_SYNC_SETTINGS", {}),
            "recent": getattr(config, "RECENT_FILES_SETTINGS", {}),
            "remote": getattr(config, "REMOTE_SETTINGS", {}),
            **getattr(config, "UI_SETTINGS", {}),
        }
        logger.debug("Default configuration loaded from config.py")
        return default_config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value with hierarchical precedence.

        Priority: runtime > user_settings > default_config > provided_default

        Args:
            key: Dot-separated configuration key (e.g., 'discovery.max_depth')
            default: Fallback value if key not found

        Returns:
            Configuration value from highest priority source
        """
        if key in self._runtime_config:
            return self._runtime_config[key]

        if self._settings.contains(key):
            return self._settings.value(key)

        default_value = self._get_nested_value(self._default_config, key)
        if default_value is not None:
            return default_value

        return default

    def get_list(self, key: str) -> list[str]:
        """
        Get a persisted list of strings.

        QSettings collapses single-element lists to scalars in INI files, so
        the type is requested explicitly.
        """
        if key in self._runtime_config:
            return list(self._runtime_config[key])
        if self._settings.contains(key):
            value = self._settings.value(key, [], type=list)
            return [str(item) for item in value or []]
        return list(self._get_nested_value(self._default_config, key) or [])

    def set(self, key: str, value: Any, persist: bool = False) -> None:
        """
        Set configuration value with optional persistence.

        Args:
            key: Configuration key to set
            value: Value to set
            persist: If True, save to QSettings; if False, store in runtime only
        """
        if persist:
            self._settings.setValue(key, value)
            self._settings.sync()
            logger.debug(f"Persisted config: {key} = {value}")
        else:
            self._runtime_config[key] = value
            logger.debug(f"Runtime config: {key} = {value}")

        self._notify_observers(key, value)

    def remove(self, key: str) -> None:
        """Remove a persisted or runtime value so the default applies again."""
        self._runtime_config.pop(key, None)
        self._settings.remove(key)
        self._settings.sync()
        self._notify_observers(key, self.get(key))

    def _get_nested_value(self, config_dict: dict[str, Any], key: str) -> Any:
        """Get value from nested dictionary using dot notation."""
        current: Any = config_dict
        for k in key.split("."):
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return None
        return current

    # Persisted UI preferences

    @property
    def theme(self) -> str:
        theme = self.get("theme", "light")
        return theme if theme in THEMES else "light"

    def toggle_theme(self) -> str:
        new_theme = "dark" if self.theme == "light" else "light"
        self.set("theme", new_theme, persist=True)
        return new_theme

    @property
    def root_directory(self) -> str | None:
        return self.get("root_directory") or None

    def set_root_directory(self, path: str | None) -> None:
        if path:
            self.set("root_directory", path, persist=True)
        else:
            self.remove("root_directory")

    def subscribe(self, callback: Callable[[str, Any], None]) -> None:
        """
        Subscribe to configuration changes.

        Args:
            callback: Function to call when configuration changes (key, value)
        """
        self._observers.append(callback)
        logger.debug(f"Added configuration observer: {getattr(callback, '__name__', callback)}")

    def unsubscribe(self, callback: Callable[[str, Any], None]) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self, key: str, value: Any) -> None:
        for observer in list(self._observers):
            try:
                observer(key, value)
            except Exception as e:
                logger.error(f"Error notifying observer {getattr(observer, '__name__', observer)}: {e}")

    def get_all_keys(self) -> list[str]:
        """Get all available configuration keys from all sources."""
        keys = set(self._runtime_config.keys())
        keys.update(self._settings.allKeys())

        def flatten_keys(d: dict[str, Any], prefix: str = "") -> None:
            for key, value in d.items():
                full_key = f"{prefix}.{key}" if prefix else key
                keys.add(full_key)
                if isinstance(value, dict):
                    flatten_keys(value, full_key)

        flatten_keys(self._default_config)
        return sorted(keys)

    def reset_to_defaults(self) -> None:
        """Reset all configuration to default values."""
        self._runtime_config.clear()
        self._settings.clear()
        self._settings.sync()
        logger.info("Configuration reset to defaults")
        self._notify_observers("__reset__", None)

    def export_config(self) -> dict[str, Any]:
        """Export current effective configuration for debugging."""
        exported = {key: self.get(key) for key in self.get_all_keys()}
        logger.info(f"Exported {len(exported)} configuration keys")
        return exported
