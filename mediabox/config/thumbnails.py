"""Module: mediabox.config.thumbnails

Author: Michael Economou
Date: 2026-10-19

Thumbnail generation settings: limits, worker pool sizing, presets.
"""

# =====================================
# TRANSFORM LIMITS
# =====================================

THUMBNAIL_MIN_DIMENSION = 1
THUMBNAIL_MAX_DIMENSION = 4096

MODIFIER_FIT = "fit"
MODIFIER_CARET = "caret"
SUPPORTED_MODIFIERS = {MODIFIER_FIT, MODIFIER_CARET}

# =====================================
# ARTIFACT STORAGE
# =====================================

THUMBNAIL_ARTIFACT_FORMAT = "PNG"
THUMBNAIL_ARTIFACT_SUFFIX = ".png"

# Leading characters of the cache key used as shard directory name
THUMBNAIL_SHARD_WIDTH = 2

# =====================================
# GENERATION WORKERS
# =====================================

# None = auto-detect from physical core count
THUMBNAIL_QUEUE_WORKERS = None
THUMBNAIL_QUEUE_WORKERS_CAP = 8

# Extra threads reserved for instant requests
THUMBNAIL_INSTANT_WORKERS = 2

# =====================================
# BACKGROUND PRE-COMPUTATION
# =====================================

# Queries generated for newly indexed content
THUMBNAIL_PRESETS = [
    {"width": 160, "height": 160, "modifier": "caret"},
]
