"""Tests for the content index."""

import hashlib
import os

import pytest

from mediabox.core.content_index import ContentIndex, detect_magic
from mediabox.core.errors import IOFailure, NotFoundError
from mediabox.core.identity import IdentityResolver
from mediabox.services.interfaces import ContentRepositoryProtocol


def _sha256(path):
    return hashlib.sha256(path.read_bytes()).hexdigest()


@pytest.fixture
def index(resolver):
    return ContentIndex(resolver=resolver)


class TestDetectMagic:
    """MIME sniffing via QMimeDatabase."""

    def test_png(self, make_png):
        assert detect_magic(make_png()) == "image/png"

    def test_content_wins_over_extension(self, make_png):
        assert detect_magic(make_png(name="looks-like.txt")) == "image/png"


@pytest.mark.xattr
class TestContentIndex:
    """Indexing and resolving with persisted identities."""

    def test_is_content_repository(self, index):
        assert isinstance(index, ContentRepositoryProtocol)

    def test_index_persists_hash_and_magic(self, index, resolver, xattr_dir, make_png):
        image = make_png(directory=xattr_dir)
        identity = index.index_path(image)

        assert identity.hash == _sha256(image)
        assert identity.magic == "image/png"
        stored = resolver.read_identity(image)
        assert (stored.uuid, stored.hash, stored.magic) == (identity.uuid, identity.hash, "image/png")

    def test_stored_hash_is_reused(self, index, xattr_dir, monkeypatch):
        target = xattr_dir / "a.bin"
        target.write_bytes(b"abc")
        index.index_path(target)

        def fail(*_args, **_kwargs):
            raise AssertionError("content hashed twice")

        monkeypatch.setattr(index._hasher, "compute_hash", fail)
        assert index.index_path(target).hash == _sha256(target)

    def test_signal_and_resolve(self, index, xattr_dir):
        target = xattr_dir / "a.bin"
        target.write_bytes(b"abc")
        seen = []
        index.content_indexed.connect(lambda h, p, m: seen.append((h, p, m)))

        identity = index.index_path(target)

        assert seen == [(identity.hash, str(target.absolute()), identity.magic)]
        assert index.resolve(identity.hash) == target.absolute()
        assert index.resolve(identity.hash.upper()) == target.absolute()
        assert index.resolve("0" * 64) is None

    def test_directories_are_not_indexed(self, index, xattr_dir):
        identity = index.index_path(xattr_dir)
        assert identity.is_directory
        assert len(index) == 0

    def test_resolve_drops_modified_files(self, index, xattr_dir):
        target = xattr_dir / "a.bin"
        target.write_bytes(b"abc")
        identity = index.index_path(target)

        stamp = (identity.mtime + 5000) * 1_000_000
        os.utime(target, ns=(stamp, stamp))

        assert index.resolve(identity.hash) is None
        assert index.entry(target) is None

    def test_resolve_drops_deleted_files(self, index, xattr_dir):
        target = xattr_dir / "a.bin"
        target.write_bytes(b"abc")
        identity = index.index_path(target)
        target.unlink()
        assert index.resolve(identity.hash) is None

    def test_duplicates_resolve_to_any_holder(self, index, xattr_dir):
        a = xattr_dir / "a.bin"
        b = xattr_dir / "b.bin"
        a.write_bytes(b"same")
        b.write_bytes(b"same")
        index.index_path(a)
        identity = index.index_path(b)

        assert index.resolve(identity.hash) in {a.absolute(), b.absolute()}
        assert index.forget(a)
        assert index.resolve(identity.hash) == b.absolute()
        assert not index.forget(a)

    def test_index_tree(self, index, xattr_dir):
        (xattr_dir / "sub").mkdir()
        (xattr_dir / "a.bin").write_bytes(b"a")
        (xattr_dir / "sub" / "b.bin").write_bytes(b"b")
        os.symlink(xattr_dir / "gone", xattr_dir / "dangling")

        assert index.index_tree(xattr_dir) == 2
        assert len(index) == 2


class TestContentIndexWithoutAttributes:
    """Filesystems that refuse identity writes still get indexed in memory."""

    def test_unpersisted_hash_is_indexed(self, tmp_path, monkeypatch):
        from mediabox.infra.filesystem import xattr_codec

        def refuse(*_args, **_kwargs):
            raise IOFailure("Operation not supported")

        monkeypatch.setattr(xattr_codec, "read_attribute", lambda *_a, **_k: None)
        monkeypatch.setattr(xattr_codec, "write_attribute", refuse)

        target = tmp_path / "a.bin"
        target.write_bytes(b"abc")
        index = ContentIndex(resolver=IdentityResolver())

        identity = index.index_path(target)
        assert identity.hash == _sha256(target)
        assert index.resolve(identity.hash) == target.absolute()

    def test_missing_path(self, tmp_path, index):
        with pytest.raises(NotFoundError):
            index.index_path(tmp_path / "missing")
