"""
Service protocol definitions for mediabox.

Author: Michael Economou
Date: 2026-10-19

Protocol classes for the collaborators the thumbnail pipeline depends on.
Using Protocols keeps the pipeline testable with plain fakes (for example a
renderer that counts how often it ran).

All protocols are runtime-checkable, so isinstance() works with them.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from mediabox.core.thumbnail.transform import TransformSignature

__all__ = [
    "HashServiceProtocol",
    "ContentRepositoryProtocol",
    "ThumbnailRendererProtocol",
]


@runtime_checkable
class HashServiceProtocol(Protocol):
    """Strong content hashing of a single file."""

    def compute_hash(
        self,
        path: Path,
        algorithm: str | None = None,
        progress_callback: Callable[[int], None] | None = None,
    ) -> str:
        """Return the hex digest of path's bytes.

        Raises:
            NotFoundError: If path does not exist.
            IOFailure: If the file cannot be read.
        """
        ...


@runtime_checkable
class ContentRepositoryProtocol(Protocol):
    """Maps a content hash to a source file that currently has that content."""

    def resolve(self, content_hash: str) -> Path | None:
        """Return a readable path for content_hash, or None if unknown."""
        ...


@runtime_checkable
class ThumbnailRendererProtocol(Protocol):
    """Renders one transform of a source image to encoded artifact bytes."""

    def render(self, source: Path, signature: TransformSignature) -> bytes:
        """Render source according to signature.

        Raises:
            GenerationFailure: If the source cannot be decoded or encoded.
        """
        ...
