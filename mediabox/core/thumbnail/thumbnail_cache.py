"""Module: thumbnail_cache.py.

Author: Michael Economou
Date: 2026-10-19

Content-addressed thumbnail artifact store.

Layout:
    <cache_dir>/<key[:2]>/<key>.png

Keys come from transform.cache_key(), so an artifact is immutable once
written: storing the same key again is a successful no-op. Writes go to a
temporary file in the shard directory and are moved into place with
os.replace(), so readers never observe a partially written artifact and
concurrent workers never need a lock (each writes under its own key).
"""

from __future__ import annotations

import os
import re
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

from mediabox.config import THUMBNAIL_ARTIFACT_SUFFIX, THUMBNAIL_SHARD_WIDTH
from mediabox.core.errors import IOFailure, from_os_error
from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

_KEY_PATTERN = re.compile(r"^[0-9a-f]{16,128}$")


@dataclass
class ThumbnailCacheConfig:
    """Configuration for the artifact store.

    Attributes:
        cache_dir: Root directory for artifacts
        artifact_suffix: File suffix of stored artifacts
        shard_width: Number of leading key characters used as shard directory

    """

    cache_dir: Path
    artifact_suffix: str = THUMBNAIL_ARTIFACT_SUFFIX
    shard_width: int = THUMBNAIL_SHARD_WIDTH

    @classmethod
    def default(cls) -> ThumbnailCacheConfig:
        """Create default configuration using app paths."""
        from mediabox.utils.paths import AppPaths

        return cls(cache_dir=AppPaths.get_thumbnails_dir())


@dataclass(frozen=True)
class CachedArtifact:
    """A persisted thumbnail.

    Attributes:
        key: Cache key the artifact is stored under
        path: Absolute path of the artifact file
        created_at: Artifact file mtime (seconds since epoch)

    """

    key: str
    path: Path
    created_at: float


class ThumbnailDiskCache:
    """Persistent, sharded storage of rendered thumbnails."""

    def __init__(self, config: ThumbnailCacheConfig | None = None):
        self._config = config or ThumbnailCacheConfig.default()
        self._cache_dir = Path(self._config.cache_dir)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._stores = 0

        self._cache_dir.mkdir(parents=True, exist_ok=True)
        logger.info("[ThumbnailDiskCache] Initialized at: %s", self._cache_dir)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def artifact_path(self, key: str) -> Path:
        """Return where key's artifact lives (whether or not it exists).

        Raises:
            ValueError: If key is not a lowercase hex digest.

        """
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid cache key: {key!r}")
        shard = key[: self._config.shard_width]
        return self._cache_dir / shard / f"{key}{self._config.artifact_suffix}"

    def lookup(self, key: str) -> CachedArtifact | None:
        """Return the stored artifact for key, or None on a miss.

        Raises:
            IOFailure: If the artifact exists but cannot be inspected.

        """
        path = self.artifact_path(key)
        try:
            st = path.stat()
        except FileNotFoundError:
            with self._lock:
                self._misses += 1
            return None
        except OSError as e:
            raise from_os_error(e, path) from e

        with self._lock:
            self._hits += 1
        logger.debug("[ThumbnailDiskCache] Cache HIT: %s", key[:16])
        return CachedArtifact(key=key, path=path, created_at=st.st_mtime)

    def store(self, key: str, data: bytes) -> CachedArtifact:
        """Persist data under key; an existing artifact is left untouched.

        Raises:
            IOFailure: If the artifact cannot be written.

        """
        existing = self.lookup(key)
        if existing is not None:
            logger.debug("[ThumbnailDiskCache] Already stored: %s", key[:16])
            return existing

        path = self.artifact_path(key)
        tmp_path: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{key[:16]}.", suffix=".tmp", dir=path.parent)
            with os.fdopen(fd, "wb") as f:
                os.fchmod(f.fileno(), 0o644)
                f.write(data)
            os.replace(tmp_path, path)
            tmp_path = None
            st = path.stat()
        except OSError as e:
            raise IOFailure(f"Failed to store thumbnail {key[:16]}: {e}", path) from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug("[ThumbnailDiskCache] Could not remove temp file %s", tmp_path)

        with self._lock:
            self._stores += 1
        logger.debug("[ThumbnailDiskCache] Saved: %s (%d bytes)", key[:16], len(data))
        return CachedArtifact(key=key, path=path, created_at=st.st_mtime)

    def remove(self, key: str) -> bool:
        """Remove key's artifact.

        Returns:
            True if removed, False if it was not stored

        """
        path = self.artifact_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise from_os_error(e, path) from e
        logger.debug("[ThumbnailDiskCache] Removed: %s", key[:16])
        return True

    def clear(self) -> int:
        """Remove every stored artifact.

        Returns:
            Number of files removed

        """
        count = 0
        pattern = f"*/*{self._config.artifact_suffix}"
        try:
            for artifact in self._cache_dir.glob(pattern):
                artifact.unlink()
                count += 1
        except OSError as e:
            raise from_os_error(e, self._cache_dir) from e
        logger.info("[ThumbnailDiskCache] Cleared %d files", count)
        return count

    def size(self) -> int:
        """Number of stored artifacts."""
        return sum(1 for _ in self._cache_dir.glob(f"*/*{self._config.artifact_suffix}"))

    def get_stats(self) -> dict[str, int]:
        with self._lock:
            return {"hits": self._hits, "misses": self._misses, "stores": self._stores}
