"""Module: content_index.py

Author: Michael Economou
Date: 2026-10-19

In-memory content index: content hash -> paths currently holding it.

Indexing a path reads its identity; a regular file that has no stored hash
yet is hashed, its MIME type detected from content, and both are persisted
through update_file_hash(). When persisting is refused (the file changed
while being hashed, or the filesystem does not keep attributes) the hash is
still indexed if the file's mtime is the one that was hashed.

resolve() re-checks the recorded mtime before answering, so a path whose
content changed since indexing is dropped instead of being served.

The index implements ContentRepositoryProtocol and is what the Thumbnailer
resolves sources through.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from pathlib import Path

from mediabox.config import DEFAULT_MAGIC
from mediabox.core.errors import (
    IOFailure,
    MediaboxError,
    NotFoundError,
    StaleIdentityError,
)
from mediabox.core.identity.identity_resolver import IdentityResolver, get_identity_resolver
from mediabox.core.pyqt_imports import QMimeDatabase
from mediabox.domain.identity import FileIdentity
from mediabox.services.hash_service import HashService
from mediabox.services.interfaces import HashServiceProtocol
from mediabox.utils.events import Observable, Signal
from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


def detect_magic(path: str | os.PathLike[str]) -> str:
    """Return the MIME type name of path, sniffed from its content."""
    mime = QMimeDatabase().mimeTypeForFile(os.fspath(path), QMimeDatabase.MatchContent)
    if not mime.isValid():
        return DEFAULT_MAGIC
    return mime.name() or DEFAULT_MAGIC


@dataclass(frozen=True)
class IndexEntry:
    """One indexed path."""

    path: Path
    content_hash: str
    magic: str
    mtime: int


class ContentIndex(Observable):
    """Maps content hashes to the files that hold them.

    Signals:
        content_indexed: Emitted after a file is indexed (hash, path, magic)

    """

    content_indexed = Signal(str, str, str)

    def __init__(
        self,
        hasher: HashServiceProtocol | None = None,
        resolver: IdentityResolver | None = None,
    ):
        self._hasher = hasher or HashService()
        self._resolver = resolver or get_identity_resolver()
        self._entries: dict[Path, IndexEntry] = {}
        self._by_hash: dict[str, list[Path]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def index_path(self, path: str | os.PathLike[str]) -> FileIdentity:
        """Index one path and return its (possibly updated) identity.

        Directories are returned unchanged and not indexed.

        Raises:
            NotFoundError: If path does not exist.
            NotSupportedTypeError: If path is neither a file nor a directory.
            IOFailure: If the file cannot be read.

        """
        identity = self._resolver.read_identity(path)
        if identity.is_directory:
            return identity

        if identity.hash is None:
            identity = self._hash_and_store(path, identity)

        entry = IndexEntry(
            path=Path(path).absolute(),
            content_hash=identity.hash,
            magic=identity.magic or DEFAULT_MAGIC,
            mtime=identity.mtime,
        )
        self._record(entry)
        self.content_indexed.emit(entry.content_hash, str(entry.path), entry.magic)
        return identity

    def _hash_and_store(self, path: str | os.PathLike[str], identity: FileIdentity) -> FileIdentity:
        content_hash = self._hasher.compute_hash(Path(path))
        magic = detect_magic(path)
        try:
            return self._resolver.update_file_hash(
                path, identity.uuid, content_hash, magic, identity.mtime
            )
        except (StaleIdentityError, IOFailure) as e:
            if self._resolver.read_timestamp(path) != identity.mtime:
                raise
            logger.warning("[ContentIndex] Hash of %s not persisted: %s", path, e)
            return identity.with_content(content_hash, magic)

    def _record(self, entry: IndexEntry) -> None:
        with self._lock:
            previous = self._entries.get(entry.path)
            if previous is not None:
                self._unlink_locked(previous)
            self._entries[entry.path] = entry
            self._by_hash.setdefault(entry.content_hash, []).append(entry.path)

    def _unlink_locked(self, entry: IndexEntry) -> None:
        paths = self._by_hash.get(entry.content_hash)
        if paths is None:
            return
        if entry.path in paths:
            paths.remove(entry.path)
        if not paths:
            del self._by_hash[entry.content_hash]

    def index_tree(self, root: str | os.PathLike[str]) -> int:
        """Index every regular file under root.

        Entries that fail are logged and skipped.

        Returns:
            Number of files indexed

        """
        count = 0
        for dirpath, _dirnames, filenames in os.walk(root):
            for filename in filenames:
                file_path = os.path.join(dirpath, filename)
                try:
                    self.index_path(file_path)
                except MediaboxError as e:
                    logger.warning("[ContentIndex] Skipping %s: %s", file_path, e)
                    continue
                count += 1
        logger.info("[ContentIndex] Indexed %d files under %s", count, root)
        return count

    def resolve(self, content_hash: str) -> Path | None:
        """Return a path currently holding content_hash, or None."""
        with self._lock:
            candidates = [self._entries[p] for p in self._by_hash.get(content_hash.lower(), [])]

        for entry in candidates:
            try:
                current = self._resolver.read_timestamp(entry.path)
            except NotFoundError:
                current = None
            if current == entry.mtime:
                return entry.path
            logger.debug("[ContentIndex] Dropping stale entry: %s", entry.path)
            self.forget(entry.path)
        return None

    def forget(self, path: str | os.PathLike[str]) -> bool:
        """Remove path from the index.

        Returns:
            True if the path was indexed

        """
        key = Path(path).absolute()
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return False
            self._unlink_locked(entry)
            return True

    def entry(self, path: str | os.PathLike[str]) -> IndexEntry | None:
        with self._lock:
            return self._entries.get(Path(path).absolute())
