"""Tests for the thumbnail artifact store."""

import hashlib
import os

import pytest

from mediabox.core.errors import IOFailure
from mediabox.core.thumbnail.thumbnail_cache import (
    CachedArtifact,
    ThumbnailCacheConfig,
    ThumbnailDiskCache,
)


def _key(text):
    return hashlib.sha256(text.encode()).hexdigest()


@pytest.fixture
def cache(tmp_path):
    return ThumbnailDiskCache(ThumbnailCacheConfig(cache_dir=tmp_path / "thumbs"))


class TestThumbnailDiskCache:
    """Content-addressed storage."""

    def test_miss_then_hit(self, cache):
        key = _key("a")
        assert cache.lookup(key) is None

        stored = cache.store(key, b"png-bytes")
        assert isinstance(stored, CachedArtifact)
        assert stored.path.read_bytes() == b"png-bytes"

        found = cache.lookup(key)
        assert found is not None
        assert found.path == stored.path
        assert cache.get_stats() == {"hits": 1, "misses": 1, "stores": 1}

    def test_sharded_layout(self, cache, tmp_path):
        key = _key("layout")
        artifact = cache.store(key, b"x")
        assert artifact.path == tmp_path / "thumbs" / key[:2] / f"{key}.png"

    def test_store_is_idempotent(self, cache):
        key = _key("a")
        first = cache.store(key, b"first")
        second = cache.store(key, b"second")
        assert second.path == first.path
        assert first.path.read_bytes() == b"first"
        assert cache.size() == 1

    def test_no_temp_files_left(self, cache):
        key = _key("a")
        cache.store(key, b"data")
        leftovers = [p for p in cache.cache_dir.rglob("*") if p.is_file() and p.suffix != ".png"]
        assert leftovers == []

    def test_remove_and_clear(self, cache):
        keys = [_key(str(i)) for i in range(5)]
        for key in keys:
            cache.store(key, b"x")
        assert cache.size() == 5

        assert cache.remove(keys[0])
        assert not cache.remove(keys[0])
        assert cache.clear() == 4
        assert cache.size() == 0

    @pytest.mark.parametrize("key", ["", "../../etc/passwd", "ABCDEF0123456789", "zz" * 32])
    def test_rejects_malformed_keys(self, cache, key):
        with pytest.raises(ValueError):
            cache.artifact_path(key)

    def test_write_failure_is_io_failure(self, cache, monkeypatch):
        def refuse(*_args, **_kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(os, "replace", refuse)
        key = _key("a")
        with pytest.raises(IOFailure):
            cache.store(key, b"data")
        assert cache.lookup(key) is None
        assert list(cache.artifact_path(key).parent.iterdir()) == []

    def test_default_config_uses_app_paths(self, isolated_data_dir):
        config = ThumbnailCacheConfig.default()
        assert config.cache_dir == isolated_data_dir / "cache" / "thumbnails"
