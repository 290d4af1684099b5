"""Filesystem infrastructure: extended attribute codec."""

from mediabox.infra.filesystem.xattr_codec import (
    read_attribute,
    remove_attribute,
    write_attribute,
    xattr_supported,
)

__all__ = ["read_attribute", "remove_attribute", "write_attribute", "xattr_supported"]
