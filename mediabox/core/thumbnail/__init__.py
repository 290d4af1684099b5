"""Module: __init__.py.

Author: Michael Economou
Date: 2026-10-19

Thumbnail generation pipeline.

Provides:
- TransformSignature: canonical thumbnail parameters and cache keys
- ThumbnailDiskCache: content-addressed artifact store
- ImageThumbnailProvider: Qt-based rendering (fit / caret)
- GenerationQueue: single-flight, bounded-concurrency job runner
- Thumbnailer: request() facade composing the above
"""

from mediabox.core.thumbnail.generation_queue import GenerationQueue
from mediabox.core.thumbnail.thumbnail_cache import (
    CachedArtifact,
    ThumbnailCacheConfig,
    ThumbnailDiskCache,
)
from mediabox.core.thumbnail.thumbnail_manager import Thumbnailer
from mediabox.core.thumbnail.transform import TransformSignature, cache_key

__all__ = [
    "CachedArtifact",
    "GenerationQueue",
    "ThumbnailCacheConfig",
    "ThumbnailDiskCache",
    "Thumbnailer",
    "TransformSignature",
    "cache_key",
]
