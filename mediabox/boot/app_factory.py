"""Application factory - Creates a fully wired thumbnail pipeline.

Author: Michael Economou
Date: 2026-10-19
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mediabox.config import APP_NAME
from mediabox.config.settings import SettingsManager, get_settings
from mediabox.core.content_index import ContentIndex
from mediabox.core.thumbnail.generation_queue import GenerationQueue
from mediabox.core.thumbnail.providers import ImageThumbnailProvider
from mediabox.core.thumbnail.thumbnail_cache import ThumbnailCacheConfig, ThumbnailDiskCache
from mediabox.core.thumbnail.thumbnail_manager import Thumbnailer
from mediabox.services.hash_service import HashService
from mediabox.services.interfaces import ContentRepositoryProtocol
from mediabox.utils.logging.logger_factory import get_cached_logger
from mediabox.utils.logging.logger_setup import ConfigureLogger

logger = get_cached_logger(__name__)


def init_logging(
    app_name: str = APP_NAME,
    settings: SettingsManager | None = None,
    log_dir: str | Path | None = None,
) -> ConfigureLogger:
    """Install the root logging handlers from the logging settings."""
    settings = settings or get_settings()
    return ConfigureLogger(
        log_name=app_name,
        log_dir=log_dir,
        console_level=settings.logging.get("console_level"),
        file_level=settings.logging.get("file_level"),
        debug_file=bool(settings.logging.get("debug_file")),
    )


def create_content_index() -> ContentIndex:
    """Create an empty content index using sha256 hashing."""
    return ContentIndex(hasher=HashService("sha256"))


def create_thumbnailer(
    settings: SettingsManager | None = None,
    repository: ContentRepositoryProtocol | None = None,
) -> Thumbnailer:
    """Build cache, renderer, queue and facade from settings.

    Args:
        settings: Settings to read (global settings if None)
        repository: Source resolver (a new ContentIndex if None)

    Returns:
        Ready Thumbnailer; call shutdown() when done

    """
    settings = settings or get_settings()
    thumbnails = settings.thumbnails

    cache_config = ThumbnailCacheConfig.default()
    if thumbnails.cache_dir is not None:
        cache_config = ThumbnailCacheConfig(cache_dir=thumbnails.cache_dir)

    queue = GenerationQueue(
        max_workers=thumbnails.get("queue_workers"),
        instant_workers=int(thumbnails.get("instant_workers")),
    )
    thumbnailer = Thumbnailer(
        repository=repository if repository is not None else create_content_index(),
        cache=ThumbnailDiskCache(cache_config),
        renderer=ImageThumbnailProvider(),
        queue=queue,
    )
    logger.info("[boot] Thumbnailer created (%d queued workers)", queue.max_workers)
    return thumbnailer


@dataclass
class MediaboxApp:
    """Container for the wired components."""

    settings: SettingsManager
    index: ContentIndex
    thumbnailer: Thumbnailer

    def shutdown(self, wait: bool = True) -> None:
        self.thumbnailer.shutdown(wait=wait)


def create_app(settings: SettingsManager | None = None) -> MediaboxApp:
    """Create index and thumbnailer, prefetching presets for indexed images
    when the thumbnail settings ask for it.
    """
    settings = settings or get_settings()
    index = create_content_index()
    thumbnailer = create_thumbnailer(settings, repository=index)
    if settings.thumbnails.get("prefetch_on_index"):
        thumbnailer.attach(index, settings.thumbnails.get("presets"))

    logger.info("[boot] Application created")
    return MediaboxApp(settings=settings, index=index, thumbnailer=thumbnailer)
