"""Module: xattr_codec.py.

Author: Michael Economou
Date: 2026-10-19

Reads and writes the JSON identity record kept in one reserved extended
attribute (IDENTITY_XATTR_NAME, "user.mediabox" by default).

Absent and corrupt values both read back as None; deciding what a missing
record means is left to the identity resolver. Filesystems without user
attribute support behave as if every attribute were absent on read and fail
with IOFailure on write.
"""

from __future__ import annotations

import errno
import json
import os
from typing import Any

from mediabox.config import IDENTITY_XATTR_MAX_BYTES, IDENTITY_XATTR_NAME
from mediabox.core.errors import IOFailure, from_os_error
from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

PathLike = str | os.PathLike[str]

# ENODATA is Linux, ENOATTR the BSD spelling
_ABSENT_ERRNOS = {getattr(errno, "ENODATA", 61), getattr(errno, "ENOATTR", 93)}
_UNSUPPORTED_ERRNOS = {errno.ENOTSUP, errno.EOPNOTSUPP}


def read_attribute(path: PathLike, name: str = IDENTITY_XATTR_NAME) -> dict[str, Any] | None:
    """Return the decoded JSON object stored under name, or None.

    Raises:
        NotFoundError: If path does not exist.
        IOFailure: On other OS errors (permission, I/O).

    """
    try:
        raw = os.getxattr(path, name)
    except OSError as e:
        if e.errno in _ABSENT_ERRNOS or e.errno in _UNSUPPORTED_ERRNOS:
            return None
        raise from_os_error(e, path) from e

    try:
        value = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        logger.debug("[XattrCodec] Dropping non-JSON attribute on: %s", path)
        return None

    if not isinstance(value, dict):
        logger.debug("[XattrCodec] Dropping non-object attribute on: %s", path)
        return None
    return value


def write_attribute(
    path: PathLike, record: dict[str, Any], name: str = IDENTITY_XATTR_NAME
) -> None:
    """Serialize record compactly and store it under name.

    Raises:
        NotFoundError: If path does not exist.
        IOFailure: If the value is too large or the filesystem refuses it.

    """
    payload = json.dumps(record, separators=(",", ":"), sort_keys=True).encode("utf-8")
    if len(payload) > IDENTITY_XATTR_MAX_BYTES:
        raise IOFailure(f"identity record too large ({len(payload)} bytes)", path)

    try:
        os.setxattr(path, name, payload)
    except OSError as e:
        raise from_os_error(e, path) from e


def remove_attribute(path: PathLike, name: str = IDENTITY_XATTR_NAME) -> None:
    """Remove the attribute; an absent attribute is not an error."""
    try:
        os.removexattr(path, name)
    except OSError as e:
        if e.errno in _ABSENT_ERRNOS or e.errno in _UNSUPPORTED_ERRNOS:
            return
        raise from_os_error(e, path) from e


def xattr_supported(directory: PathLike) -> bool:
    """Check whether user attributes can be written on directory's filesystem."""
    marker = f"{IDENTITY_XATTR_NAME}.check"
    try:
        os.setxattr(directory, marker, b"1")
        os.removexattr(directory, marker)
    except (OSError, AttributeError):
        return False
    return True
