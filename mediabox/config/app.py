"""Module: mediabox.config.app

Author: Michael Economou
Date: 2026-10-19

Application-level configuration: app info, debug flags, logging settings.
"""

# =====================================
# APPLICATION INFORMATION
# =====================================

APP_NAME = "mediabox"
APP_VERSION = "0.4.0"

# Environment variable that relocates the user data directory (tests, containers)
DATA_DIR_ENV_VAR = "MEDIABOX_DATA_DIR"

# =====================================
# LOGGING CONFIGURATION
# =====================================

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Console logging
LOG_TO_CONSOLE = True
LOG_CONSOLE_LEVEL = "INFO"

# File logging
LOG_TO_FILE = True
LOG_FILE_LEVEL = "ERROR"
LOG_FILE_MAX_BYTES = 10_000_000  # 10MB per file
LOG_FILE_BACKUP_COUNT = 5

# Debug file logging
LOG_DEBUG_FILE_ENABLED = False
LOG_DEBUG_FILE_MAX_BYTES = 20_000_000  # 20MB per debug file
LOG_DEBUG_FILE_BACKUP_COUNT = 3

# Development logging settings
SHOW_DEV_ONLY_IN_CONSOLE = False
