"""Module: mediabox.config

Author: Michael Economou
Date: 2026-10-19

Configuration package for mediabox.

This package organizes configuration into logical modules:
- app: Application info, debug flags, logging
- identity: Extended attribute name and identity record limits
- thumbnails: Thumbnail dimensions, worker pool sizing, presets

All settings are re-exported from this module:
    from mediabox.config import IDENTITY_XATTR_NAME, THUMBNAIL_MAX_DIMENSION
"""

from mediabox.config.app import *  # noqa: F401, F403
from mediabox.config.identity import *  # noqa: F401, F403
from mediabox.config.thumbnails import *  # noqa: F401, F403
