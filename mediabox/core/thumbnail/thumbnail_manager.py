"""Module: thumbnail_manager.py

Author: Michael Economou
Date: 2026-10-19

Thumbnail request orchestrator.

Provides:
- Thumbnailer: request(content_hash, query, callback) facade

Workflow:
1. Caller requests a thumbnail via request(hash, query, callback)
2. Query is canonicalized into a TransformSignature and a cache key
3. Cache hit: callback(None, path) is scheduled on the dispatcher
4. Cache miss: the key is submitted to the GenerationQueue; the job resolves
   the source through the content repository, renders, stores the artifact
   and only then returns its path to every waiter

Callbacks are never invoked on the caller's stack, whatever the outcome.
The only blocking work done on the calling thread is the cache lookup
(a single stat of the artifact path).

Usage:
    thumbnailer = Thumbnailer(repository=content_index)
    thumbnailer.request(content_hash, {"width": 160, "height": 160}, on_ready)
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mediabox.config import THUMBNAIL_PRESETS
from mediabox.core.errors import MediaboxError, NotFoundError
from mediabox.core.thumbnail.generation_queue import GenerationQueue
from mediabox.core.thumbnail.providers import ImageThumbnailProvider
from mediabox.core.thumbnail.thumbnail_cache import ThumbnailDiskCache
from mediabox.core.thumbnail.transform import (
    TransformSignature,
    admission_is_instant,
    cache_key,
)
from mediabox.utils.logging.logger_factory import get_cached_logger
from mediabox.utils.threading.callback_dispatcher import CallbackDispatcher, ResultCallback

if TYPE_CHECKING:
    from mediabox.core.content_index import ContentIndex
    from mediabox.services.interfaces import (
        ContentRepositoryProtocol,
        ThumbnailRendererProtocol,
    )

logger = get_cached_logger(__name__)


class Thumbnailer:
    """Serves thumbnails from the cache, generating missing ones once per key.

    Usage:
        thumbnailer = Thumbnailer(repository)
        thumbnailer.request(hash, {"width": "100", "height": "100"}, callback)
        # callback(error, artifact_path) runs on the delivery thread

    """

    def __init__(
        self,
        repository: ContentRepositoryProtocol,
        cache: ThumbnailDiskCache | None = None,
        renderer: ThumbnailRendererProtocol | None = None,
        queue: GenerationQueue | None = None,
        dispatcher: CallbackDispatcher | None = None,
    ):
        """Initialize the facade.

        Args:
            repository: Resolves content hashes to readable source files
            cache: Artifact store (default location if None)
            renderer: Thumbnail renderer (ImageThumbnailProvider if None)
            queue: Generation queue (created with default workers if None)
            dispatcher: Callback delivery; defaults to the queue's dispatcher
                so cache hits and generated results share one ordering

        """
        self._repository = repository
        self._cache = cache or ThumbnailDiskCache()
        self._renderer = renderer or ImageThumbnailProvider()
        if queue is None:
            queue = GenerationQueue(dispatcher=dispatcher)
        self._queue = queue
        self._dispatcher = dispatcher or queue.dispatcher

        self._lock = threading.Lock()
        self._requests = 0
        self._generated = 0

        logger.info("[Thumbnailer] Initialized, cache at %s", self._cache.cache_dir)

    @property
    def cache(self) -> ThumbnailDiskCache:
        return self._cache

    @property
    def queue(self) -> GenerationQueue:
        return self._queue

    def request(
        self, content_hash: str, query: Mapping[str, Any], callback: ResultCallback
    ) -> None:
        """Request the thumbnail of content_hash described by query.

        Args:
            content_hash: Content hash of the source
            query: width, height (required), modifier, autoOrient, instant
            callback: Receives (error, artifact_path); exactly one of the two
                is None

        """
        with self._lock:
            self._requests += 1
        try:
            signature = TransformSignature.from_query(query)
            key = cache_key(content_hash, signature)
            cached = self._cache.lookup(key)
        except MediaboxError as e:
            self._dispatcher.dispatch(callback, e, None)
            return

        if cached is not None:
            self._dispatcher.dispatch(callback, None, cached.path)
            return

        instant = admission_is_instant(query)
        created = self._queue.submit(
            key,
            partial(self._generate, key, content_hash, signature),
            callback,
            instant=instant,
        )
        logger.debug(
            "[Thumbnailer] Cache miss %s %s -> %s (%s)",
            content_hash[:16],
            signature,
            "new job" if created else "joined",
            "instant" if instant else "queued",
        )

    def _generate(self, key: str, content_hash: str, signature: TransformSignature) -> Path:
        # A job admitted after a previous one stored the key finds it here
        cached = self._cache.lookup(key)
        if cached is not None:
            return cached.path

        source = self._repository.resolve(content_hash)
        if source is None:
            raise NotFoundError(f"No source for content {content_hash}")

        data = self._renderer.render(Path(source), signature)
        artifact = self._cache.store(key, data)
        with self._lock:
            self._generated += 1
        return artifact.path

    def prefetch(
        self, content_hash: str, presets: Iterable[Mapping[str, Any]] | None = None
    ) -> None:
        """Queue background generation of presets for content_hash."""
        for preset in THUMBNAIL_PRESETS if presets is None else presets:
            self.request(content_hash, preset, partial(self._on_prefetched, content_hash))

    @staticmethod
    def _on_prefetched(content_hash: str, error: BaseException | None, path: Any) -> None:
        if error is not None:
            logger.debug("[Thumbnailer] Prefetch failed for %s: %s", content_hash[:16], error)

    def attach(
        self, index: ContentIndex, presets: Iterable[Mapping[str, Any]] | None = None
    ) -> None:
        """Prefetch presets for every image the index reports."""
        preset_list = list(THUMBNAIL_PRESETS if presets is None else presets)

        def on_indexed(content_hash: str, path: str, magic: str) -> None:
            if magic.startswith("image/"):
                self.prefetch(content_hash, preset_list)

        index.content_indexed.connect(on_indexed)
        logger.debug("[Thumbnailer] Attached to content index (%d presets)", len(preset_list))

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            requests, generated = self._requests, self._generated
        return {
            "requests": requests,
            "generated": generated,
            "cache": self._cache.get_stats(),
            "queue": self._queue.get_stats(),
        }

    def shutdown(self, wait: bool = True) -> None:
        """Stop the queue.

        The dispatcher is closed by whoever created it: the queue when it made
        its own, otherwise the caller that passed it in.
        """
        self._queue.shutdown(wait=wait)
        if wait:
            self._dispatcher.flush()
        logger.info("[Thumbnailer] Shut down")
