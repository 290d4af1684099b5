"""File hashing service implementation.

Author: Michael Economou
Date: 2026-10-19

Content hashing for content addressing. A hash is a pure function of the
file's bytes; this service never caches and never decides when a hash is
persisted (the content index stores it in the identity record).

Usage:
    from mediabox.services.hash_service import HashService

    service = HashService()
    digest = service.compute_hash(Path("/path/to/IMG_0001.jpg"))
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from pathlib import Path

from mediabox.core.errors import IOFailure, NotFoundError, from_os_error

# Supported hash algorithms
SUPPORTED_ALGORITHMS = {"sha256", "sha1", "md5"}


class HashService:
    """Streaming file hasher with adaptive buffer sizes.

    Implements HashServiceProtocol. Errors propagate to the caller.
    """

    def __init__(self, default_algorithm: str = "sha256") -> None:
        """Initialize the hash service.

        Args:
            default_algorithm: Algorithm used when compute_hash gets None.

        """
        if default_algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported algorithm: {default_algorithm}. Supported: {SUPPORTED_ALGORITHMS}"
            )
        self._default_algorithm = default_algorithm

    @property
    def default_algorithm(self) -> str:
        return self._default_algorithm

    def compute_hash(
        self,
        path: Path,
        algorithm: str | None = None,
        progress_callback: Callable[[int], None] | None = None,
    ) -> str:
        """Compute the hex digest of a single file.

        Args:
            path: Path to the file to hash.
            algorithm: 'sha256', 'sha1' or 'md5' (None = default).
            progress_callback: Optional callback(bytes_processed).

        Returns:
            Hex digest string.

        Raises:
            ValueError: If algorithm is not supported.
            NotFoundError: If path does not exist.
            IOFailure: If path is not a regular file or cannot be read.

        """
        algorithm = algorithm or self._default_algorithm
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported algorithm: {algorithm}")

        path = Path(path)
        try:
            file_size = path.stat().st_size
            if not path.is_file():
                raise IOFailure(f"Not a regular file: {path}", path)

            digest = hashlib.new(algorithm)
            buffer = bytearray(self._get_optimal_buffer_size(file_size))
            mv = memoryview(buffer)
            bytes_processed = 0

            with path.open("rb") as f:
                while True:
                    bytes_read = f.readinto(buffer)
                    if not bytes_read:
                        break
                    digest.update(mv[:bytes_read])
                    bytes_processed += bytes_read
                    if progress_callback:
                        progress_callback(bytes_processed)
        except (IOFailure, NotFoundError):
            raise
        except OSError as e:
            raise from_os_error(e, path) from e

        return digest.hexdigest()

    @staticmethod
    def _get_optimal_buffer_size(file_size: int) -> int:
        """Pick a read buffer size for file_size bytes."""
        if file_size < 64 * 1024:
            return max(min(file_size, 8 * 1024), 1)
        if file_size < 10 * 1024 * 1024:
            return 64 * 1024
        return 256 * 1024
