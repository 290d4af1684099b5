"""Tests for the identity resolver."""

import os

import pytest

from mediabox.core.errors import (
    IOFailure,
    NotFoundError,
    NotSupportedTypeError,
    StaleIdentityError,
)
from mediabox.domain import EntryType
from mediabox.infra.filesystem import read_attribute, write_attribute

HASH = "b" * 64


def _touch_ms(path, mtime_ms):
    ns = mtime_ms * 1_000_000
    os.utime(path, ns=(ns, ns))


@pytest.mark.xattr
class TestReadIdentity:
    """Identity reads against real user attributes."""

    def test_new_file_gets_persisted_identity(self, xattr_dir, resolver):
        target = xattr_dir / "IMG_0001.jpg"
        target.write_bytes(b"jpeg")
        identity = resolver.read_identity(target)

        assert identity.type is EntryType.FILE
        assert identity.name == "IMG_0001.jpg"
        assert identity.mtime == resolver.read_timestamp(target)
        assert read_attribute(target) == identity.to_dict()

    def test_repeated_reads_return_same_uuid(self, xattr_dir, resolver):
        target = xattr_dir / "a.txt"
        target.write_text("a")
        first = resolver.read_identity(target)
        second = resolver.read_identity(target)
        assert first.uuid == second.uuid
        assert resolver.regenerated_count == 1

    def test_directory_identity(self, xattr_dir, resolver):
        folder = xattr_dir / "photos"
        folder.mkdir()
        identity = resolver.read_identity(folder)
        assert identity.is_directory
        assert identity.name == "photos"
        assert resolver.read_identity(str(folder) + os.sep).uuid == identity.uuid

    def test_modification_invalidates_identity(self, xattr_dir, resolver):
        target = xattr_dir / "a.txt"
        target.write_text("a")
        _touch_ms(target, 1_000_000)
        first = resolver.read_identity(target)
        resolver.update_file_hash(target, first.uuid, HASH, "text/plain", first.mtime)

        _touch_ms(target, 2_000_000)
        second = resolver.read_identity(target)

        assert second.uuid != first.uuid
        assert second.mtime == 2_000_000
        assert second.hash is None and second.magic is None

    def test_mtime_equality_is_exact_to_the_millisecond(self, xattr_dir, resolver):
        target = xattr_dir / "a.txt"
        target.write_text("a")
        _touch_ms(target, 5_000)
        first = resolver.read_identity(target)
        _touch_ms(target, 5_001)
        assert resolver.read_identity(target).uuid != first.uuid

    def test_malformed_record_is_regenerated(self, xattr_dir, resolver):
        target = xattr_dir / "a.txt"
        target.write_text("a")
        os.setxattr(target, "user.mediabox", b"{broken")
        identity = resolver.read_identity(target)
        assert read_attribute(target) == identity.to_dict()

    def test_type_mismatch_is_stale(self, xattr_dir, resolver):
        target = xattr_dir / "a.txt"
        target.write_text("a")
        identity = resolver.read_identity(target)
        record = identity.to_dict()
        record["type"] = "directory"
        write_attribute(target, record)
        assert resolver.read_identity(target).uuid != identity.uuid

    def test_name_follows_rename(self, xattr_dir, resolver):
        target = xattr_dir / "before.txt"
        target.write_text("a")
        identity = resolver.read_identity(target)
        renamed = target.rename(xattr_dir / "after.txt")
        moved = resolver.read_identity(renamed)
        assert moved.uuid == identity.uuid
        assert moved.name == "after.txt"


class TestReadIdentityErrors:
    """Failure classification that does not depend on xattr support."""

    def test_missing_path(self, tmp_path, resolver):
        with pytest.raises(NotFoundError):
            resolver.read_identity(tmp_path / "missing")
        with pytest.raises(NotFoundError):
            resolver.read_timestamp(tmp_path / "missing")

    def test_device_is_not_supported(self, resolver):
        if not os.path.exists("/dev/null"):
            pytest.skip("no /dev/null")
        with pytest.raises(NotSupportedTypeError):
            resolver.read_identity("/dev/null")

    def test_write_failure_is_best_effort(self, tmp_path, resolver, monkeypatch):
        from mediabox.infra.filesystem import xattr_codec

        def refuse(*_args, **_kwargs):
            raise IOFailure("read-only filesystem")

        monkeypatch.setattr(xattr_codec, "read_attribute", lambda *_a, **_k: None)
        monkeypatch.setattr(xattr_codec, "write_attribute", refuse)

        target = tmp_path / "a.txt"
        target.write_text("a")
        first = resolver.read_identity(target)
        second = resolver.read_identity(target)

        assert first.name == "a.txt"
        # nothing persisted, so every read is a new instance
        assert first.uuid != second.uuid


@pytest.mark.xattr
class TestUpdateFileHash:
    """Conditional hash/magic persistence."""

    def test_stores_hash_and_magic(self, xattr_dir, resolver):
        target = xattr_dir / "a.jpg"
        target.write_bytes(b"jpeg")
        identity = resolver.read_identity(target)
        updated = resolver.update_file_hash(target, identity.uuid, HASH, "image/jpeg", identity.mtime)

        assert updated.hash == HASH
        again = resolver.read_identity(target)
        assert again.uuid == identity.uuid
        assert (again.hash, again.magic) == (HASH, "image/jpeg")

    def test_write_does_not_touch_mtime(self, xattr_dir, resolver):
        target = xattr_dir / "a.jpg"
        target.write_bytes(b"jpeg")
        identity = resolver.read_identity(target)
        resolver.update_file_hash(target, identity.uuid, HASH, "image/jpeg", identity.mtime)
        assert resolver.read_timestamp(target) == identity.mtime

    def test_changed_mtime_is_stale(self, xattr_dir, resolver):
        target = xattr_dir / "a.jpg"
        target.write_bytes(b"jpeg")
        identity = resolver.read_identity(target)
        with pytest.raises(StaleIdentityError):
            resolver.update_file_hash(target, identity.uuid, HASH, "image/jpeg", identity.mtime - 1)

    def test_changed_uuid_is_stale(self, xattr_dir, resolver):
        target = xattr_dir / "a.jpg"
        target.write_bytes(b"jpeg")
        identity = resolver.read_identity(target)
        other = "00000000-0000-4000-8000-000000000000"
        with pytest.raises(StaleIdentityError):
            resolver.update_file_hash(target, other, HASH, "image/jpeg", identity.mtime)

    def test_directory_is_not_supported(self, xattr_dir, resolver):
        identity = resolver.read_identity(xattr_dir)
        with pytest.raises(NotSupportedTypeError):
            resolver.update_file_hash(xattr_dir, identity.uuid, HASH, "x", identity.mtime)

    def test_invalid_hash_is_rejected(self, xattr_dir, resolver):
        target = xattr_dir / "a.jpg"
        target.write_bytes(b"jpeg")
        identity = resolver.read_identity(target)
        with pytest.raises(ValueError):
            resolver.update_file_hash(target, identity.uuid, "ABC", "x", identity.mtime)
