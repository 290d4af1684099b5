"""Module: errors.py.

Author: Michael Economou
Date: 2026-10-19

Error taxonomy shared by the identity and thumbnail layers.

Every error carries a short `code` and the `http_status` the HTTP layer
should answer with:

    NotFoundError          ENOENT       404
    NotSupportedTypeError  ENOTDIRFILE  404
    StaleIdentityError     ESTALE       409
    InvalidTransformError  EINVAL       400
    GenerationFailure      EGENERATION  500
    IOFailure              EIO          500

CorruptIdentityError never leaves the identity resolver; an unreadable
record is always replaced by a fresh one.
"""

from __future__ import annotations

import errno
import os


class MediaboxError(Exception):
    """Base class for all mediabox errors."""

    code = "EMEDIABOX"
    http_status = 500

    def __init__(self, message: str, path: str | os.PathLike[str] | None = None):
        super().__init__(message)
        self.path = os.fspath(path) if path is not None else None


class NotFoundError(MediaboxError):
    """Path or content hash does not exist."""

    code = "ENOENT"
    http_status = 404


class NotSupportedTypeError(MediaboxError):
    """Path exists but is neither a regular file nor a directory."""

    code = "ENOTDIRFILE"
    http_status = 404


class CorruptIdentityError(MediaboxError):
    """Stored identity attribute is unparseable or has an invalid shape."""

    code = "ECORRUPT"


class StaleIdentityError(MediaboxError):
    """Identity changed (uuid or mtime) between read and update."""

    code = "ESTALE"
    http_status = 409


class InvalidTransformError(MediaboxError, ValueError):
    """Thumbnail query options cannot be turned into a transform signature."""

    code = "EINVAL"
    http_status = 400


class GenerationFailure(MediaboxError):
    """Rendering or encoding a thumbnail failed."""

    code = "EGENERATION"


class IOFailure(MediaboxError):
    """Disk or permission error while reading or writing."""

    code = "EIO"


_NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENOTDIR}


def from_os_error(err: OSError, path: str | os.PathLike[str] | None = None) -> MediaboxError:
    """Classify an OSError into NotFoundError or IOFailure.

    The caller raises the result `from err` so the original stays attached.
    """
    target = path if path is not None else err.filename
    if err.errno in _NOT_FOUND_ERRNOS:
        return NotFoundError(f"No such file or directory: {target}", target)
    return IOFailure(f"{err.strerror or err}: {target}", target)
