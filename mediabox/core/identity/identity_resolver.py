"""Module: identity_resolver.py.

Author: Michael Economou
Date: 2026-10-19

Turns stat() plus the stored identity attribute into a trustworthy
FileIdentity.

Two tiers:
- the attribute is the durable record (uuid, and hash/magic once computed)
- the current mtime decides whether that record still describes the path

A record is kept only when it parses, has a valid shape, names the same
entry type, and carries exactly the current mtime. Anything else is stale:
a new uuid is generated, hash/magic are dropped (they describe superseded
content) and the fresh record is written back. The write is best-effort;
the fresh record is returned even when the filesystem refuses it.

Known race: two readers regenerating the same path at once each return
their own fresh uuid and the last attribute write wins. Callers have not
needed stronger guarantees so no lock is taken here.
"""

from __future__ import annotations

import os
import stat as stat_module

from mediabox.config import CONTENT_HASH_PATTERN, IDENTITY_XATTR_NAME
from mediabox.core.errors import (
    CorruptIdentityError,
    MediaboxError,
    NotSupportedTypeError,
    StaleIdentityError,
    from_os_error,
)
from mediabox.domain.identity import EntryType, FileIdentity
from mediabox.infra.filesystem import xattr_codec
from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

PathLike = str | os.PathLike[str]


def _mtime_ms(st: os.stat_result) -> int:
    return st.st_mtime_ns // 1_000_000


class IdentityResolver:
    """Reads, regenerates and updates identity records.

    Attributes:
        xattr_name: Attribute holding the JSON record

    """

    def __init__(self, xattr_name: str = IDENTITY_XATTR_NAME):
        self.xattr_name = xattr_name
        self._regenerated = 0

    def _stat(self, path: PathLike) -> os.stat_result:
        try:
            return os.stat(path)
        except OSError as e:
            raise from_os_error(e, path) from e

    @staticmethod
    def _entry_type(st: os.stat_result, path: PathLike) -> EntryType:
        if stat_module.S_ISREG(st.st_mode):
            return EntryType.FILE
        if stat_module.S_ISDIR(st.st_mode):
            return EntryType.DIRECTORY
        raise NotSupportedTypeError(f"Not a regular file or directory: {os.fspath(path)}", path)

    @staticmethod
    def _basename(path: PathLike) -> str:
        return os.path.basename(os.path.normpath(os.fspath(path)))

    def read_timestamp(self, path: PathLike) -> int:
        """Return the current mtime of path in integer milliseconds.

        Raises:
            NotFoundError: If path does not exist.

        """
        return _mtime_ms(self._stat(path))

    def read_identity(self, path: PathLike) -> FileIdentity:
        """Return the identity of path, regenerating it when stale.

        Raises:
            NotFoundError: If path does not exist.
            NotSupportedTypeError: If path is neither a file nor a directory.
            IOFailure: If the attribute cannot be read.

        """
        st = self._stat(path)
        entry_type = self._entry_type(st, path)
        mtime = _mtime_ms(st)
        name = self._basename(path)

        raw = xattr_codec.read_attribute(path, self.xattr_name)
        if raw is not None:
            try:
                stored = FileIdentity.from_dict(raw)
            except CorruptIdentityError as e:
                logger.debug("[IdentityResolver] Corrupt record on %s: %s", path, e)
            else:
                if stored.type is entry_type and stored.mtime == mtime:
                    return stored.with_name(name)
                logger.debug(
                    "[IdentityResolver] Stale record on %s (type %s/%s, mtime %d/%d)",
                    path,
                    stored.type.value,
                    entry_type.value,
                    stored.mtime,
                    mtime,
                )

        return self._regenerate(path, entry_type, name, mtime)

    def _regenerate(
        self, path: PathLike, entry_type: EntryType, name: str, mtime: int
    ) -> FileIdentity:
        identity = FileIdentity.create(entry_type, name, mtime)
        self._regenerated += 1
        try:
            xattr_codec.write_attribute(path, identity.to_dict(), self.xattr_name)
        except MediaboxError as e:
            logger.warning("[IdentityResolver] Could not persist identity for %s: %s", path, e)
        return identity

    def update_file_hash(
        self,
        path: PathLike,
        uuid: str,
        content_hash: str,
        magic: str,
        mtime: int,
    ) -> FileIdentity:
        """Persist hash and magic into the record of a regular file.

        The update only applies to the same instance the caller hashed: the
        current uuid must equal uuid and the current mtime must equal mtime.

        Raises:
            ValueError: If content_hash is not a sha256 hex digest.
            NotSupportedTypeError: If path is not a regular file.
            StaleIdentityError: If the uuid or the mtime no longer match.
            IOFailure: If the attribute cannot be written.

        """
        if not CONTENT_HASH_PATTERN.match(content_hash or ""):
            raise ValueError(f"Invalid content hash: {content_hash!r}")

        current = self.read_identity(path)
        if not current.is_file:
            raise NotSupportedTypeError(f"Not a regular file: {os.fspath(path)}", path)
        if current.uuid != uuid:
            raise StaleIdentityError(f"Identity instance changed: {os.fspath(path)}", path)
        if current.mtime != mtime:
            raise StaleIdentityError(f"Timestamp changed: {os.fspath(path)}", path)

        updated = current.with_content(content_hash, magic)
        xattr_codec.write_attribute(path, updated.to_dict(), self.xattr_name)
        logger.debug("[IdentityResolver] Stored hash %s for: %s", content_hash[:12], path)
        return updated

    @property
    def regenerated_count(self) -> int:
        return self._regenerated


# =====================================
# Global Instance Management
# =====================================

_identity_resolver_instance: IdentityResolver | None = None


def get_identity_resolver() -> IdentityResolver:
    """Get the shared resolver instance."""
    global _identity_resolver_instance
    if _identity_resolver_instance is None:
        _identity_resolver_instance = IdentityResolver()
    return _identity_resolver_instance


def read_identity(path: PathLike) -> FileIdentity:
    """Module-level shortcut for get_identity_resolver().read_identity()."""
    return get_identity_resolver().read_identity(path)


def read_timestamp(path: PathLike) -> int:
    """Module-level shortcut for get_identity_resolver().read_timestamp()."""
    return get_identity_resolver().read_timestamp(path)


def update_file_hash(
    path: PathLike, uuid: str, content_hash: str, magic: str, mtime: int
) -> FileIdentity:
    """Module-level shortcut for get_identity_resolver().update_file_hash()."""
    return get_identity_resolver().update_file_hash(path, uuid, content_hash, magic, mtime)
