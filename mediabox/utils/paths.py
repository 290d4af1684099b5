"""Module: paths.py.

Author: Michael Economou
Date: 2026-10-19

Centralized path management for mediabox.

Directory Structure:
    <user_data_dir>/
    ├── config.json          # Settings (see mediabox.config.settings)
    ├── logs/                # Rotating log files
    └── cache/
        └── thumbnails/      # Content-addressed thumbnail artifacts

The user data directory is $MEDIABOX_DATA_DIR when set, otherwise
$XDG_DATA_HOME/mediabox or ~/.local/share/mediabox.
"""

import os
from pathlib import Path

from mediabox.config import APP_NAME, DATA_DIR_ENV_VAR
from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class AppPaths:
    """Static accessors for application paths; directories are created lazily."""

    _user_data_dir: Path | None = None

    @classmethod
    def _get_platform_data_dir(cls) -> Path:
        override = os.environ.get(DATA_DIR_ENV_VAR)
        if override:
            return Path(override)

        xdg_data = os.environ.get("XDG_DATA_HOME")
        if xdg_data:
            return Path(xdg_data) / APP_NAME
        return Path.home() / ".local" / "share" / APP_NAME

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """Get the user data directory, creating it if necessary.

        Returns:
            Path to user data directory.

        """
        if cls._user_data_dir is None:
            cls._user_data_dir = cls._get_platform_data_dir()
            logger.info("[AppPaths] User data directory: %s", cls._user_data_dir)

        cls._user_data_dir.mkdir(parents=True, exist_ok=True)
        return cls._user_data_dir

    @classmethod
    def get_config_path(cls) -> Path:
        """Get path to config.json file."""
        return cls.get_user_data_dir() / "config.json"

    @classmethod
    def get_logs_dir(cls) -> Path:
        """Get path to logs directory."""
        logs_dir = cls.get_user_data_dir() / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        return logs_dir

    @classmethod
    def get_cache_dir(cls) -> Path:
        """Get path to cache directory."""
        cache_dir = cls.get_user_data_dir() / "cache"
        cache_dir.mkdir(parents=True, exist_ok=True)
        return cache_dir

    @classmethod
    def get_thumbnails_dir(cls) -> Path:
        """Get path to thumbnails cache directory."""
        thumbnails_dir = cls.get_cache_dir() / "thumbnails"
        thumbnails_dir.mkdir(parents=True, exist_ok=True)
        return thumbnails_dir

    @classmethod
    def reset(cls) -> None:
        """Reset cached paths (mainly for testing)."""
        cls._user_data_dir = None
