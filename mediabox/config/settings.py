"""Module: settings.py

Author: Michael Economou
Date: 2026-10-19

JSON-backed user settings.

Module constants in mediabox.config are the defaults; a config.json in the
user data directory overrides them per category:

    {
      "thumbnails": {"queue_workers": 4, "instant_workers": 2, ...},
      "logging": {"console_level": "DEBUG", ...},
      "_metadata": {"last_saved": "...", "version": "v0.4.0"}
    }

Missing keys fall back to defaults, unknown categories are ignored.
"""

from __future__ import annotations

import json
import shutil
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Generic, TypeVar

from mediabox.config.app import (
    APP_NAME,
    APP_VERSION,
    LOG_CONSOLE_LEVEL,
    LOG_DEBUG_FILE_ENABLED,
    LOG_FILE_LEVEL,
    LOG_TO_CONSOLE,
    LOG_TO_FILE,
)
from mediabox.config.thumbnails import (
    THUMBNAIL_INSTANT_WORKERS,
    THUMBNAIL_PRESETS,
    THUMBNAIL_QUEUE_WORKERS,
)
from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

T = TypeVar("T")


class ConfigCategory(Generic[T]):
    """Base class for configuration categories with type safety and defaults."""

    def __init__(self, name: str, defaults: dict[str, Any]):
        self.name = name
        self.defaults = defaults
        self._data = defaults.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with fallback to default."""
        return self._data.get(key, default if default is not None else self.defaults.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def update(self, data: dict[str, Any]) -> None:
        self._data.update(data)

    def reset(self) -> None:
        """Reset all values to defaults."""
        self._data = self.defaults.copy()

    def to_dict(self) -> dict[str, Any]:
        return self._data.copy()

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load from dictionary, applying defaults for missing keys."""
        self._data = self.defaults.copy()
        self._data.update(data)


class ThumbnailSettings(ConfigCategory[Any]):
    """Thumbnail pipeline settings."""

    def __init__(self) -> None:
        defaults = {
            "cache_dir": None,  # None = AppPaths.get_thumbnails_dir()
            "queue_workers": THUMBNAIL_QUEUE_WORKERS,  # None = physical cores
            "instant_workers": THUMBNAIL_INSTANT_WORKERS,
            "presets": [dict(p) for p in THUMBNAIL_PRESETS],
            "prefetch_on_index": True,
        }
        super().__init__("thumbnails", defaults)

    @property
    def cache_dir(self) -> Path | None:
        value = self.get("cache_dir")
        return Path(value) if value else None


class LoggingSettings(ConfigCategory[Any]):
    """Logging settings."""

    def __init__(self) -> None:
        defaults = {
            "console": LOG_TO_CONSOLE,
            "console_level": LOG_CONSOLE_LEVEL,
            "file": LOG_TO_FILE,
            "file_level": LOG_FILE_LEVEL,
            "debug_file": LOG_DEBUG_FILE_ENABLED,
        }
        super().__init__("logging", defaults)


class SettingsManager:
    """Loads and saves setting categories in a single JSON file."""

    def __init__(self, config_file: str | Path | None = None, app_name: str = APP_NAME):
        """Initialize the manager.

        Args:
            config_file: JSON file location (AppPaths config path if None)
            app_name: Recorded in the saved file's metadata

        """
        if config_file is None:
            from mediabox.utils.paths import AppPaths

            config_file = AppPaths.get_config_path()

        self.app_name = app_name
        self.config_file = Path(config_file)
        self.backup_file = self.config_file.with_name(self.config_file.name + ".bak")
        self._lock = threading.RLock()
        self._categories: dict[str, ConfigCategory[Any]] = {}

        self.thumbnails = ThumbnailSettings()
        self.logging = LoggingSettings()
        self.register_category(self.thumbnails)
        self.register_category(self.logging)

    def register_category(self, category: ConfigCategory[Any]) -> None:
        with self._lock:
            self._categories[category.name] = category

    def get_category(self, category_name: str) -> ConfigCategory[Any] | None:
        return self._categories.get(category_name)

    def list_categories(self) -> list[str]:
        return list(self._categories.keys())

    def load(self) -> bool:
        """Load settings from the JSON file.

        A missing file leaves every category at its defaults.

        Returns:
            False if the file exists but cannot be read or parsed

        """
        with self._lock:
            if not self.config_file.exists():
                logger.debug(
                    "[SettingsManager] No config file found, using defaults",
                    extra={"dev_only": True},
                )
                return True

            try:
                with open(self.config_file, encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.error("[SettingsManager] Failed to load %s: %s", self.config_file, e)
                return False

            if not isinstance(data, dict):
                logger.error("[SettingsManager] Ignoring malformed config: %s", self.config_file)
                return False

            for category_name, category in self._categories.items():
                section = data.get(category_name)
                if isinstance(section, dict):
                    category.from_dict(section)

            logger.info("[SettingsManager] Settings loaded from %s", self.config_file)
            return True

    def save(self, create_backup: bool = True) -> bool:
        """Write every category to the JSON file.

        Returns:
            False if the file cannot be written

        """
        with self._lock:
            data: dict[str, Any] = {
                name: category.to_dict() for name, category in self._categories.items()
            }
            data["_metadata"] = {
                "last_saved": datetime.now().isoformat(),
                "version": f"v{APP_VERSION}",
                "app_name": self.app_name,
            }

            try:
                self.config_file.parent.mkdir(parents=True, exist_ok=True)
                if create_backup and self.config_file.exists():
                    shutil.copy2(self.config_file, self.backup_file)
                with open(self.config_file, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
            except (OSError, TypeError) as e:
                logger.error("[SettingsManager] Failed to save %s: %s", self.config_file, e)
                return False

            logger.debug("[SettingsManager] Settings saved to %s", self.config_file)
            return True


_settings_instance: SettingsManager | None = None


def get_settings() -> SettingsManager:
    """Get the global settings, loading them on first use."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = SettingsManager()
        _settings_instance.load()
    return _settings_instance
