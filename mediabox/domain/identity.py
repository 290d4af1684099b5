"""Module: identity.py.

Author: Michael Economou
Date: 2026-10-19

FileIdentity - typed view of the identity record stored on every file and
directory:

    {"uuid": "...", "type": "file", "name": "IMG_0001.jpg",
     "mtime": 1418428800000, "hash": "<sha256>", "magic": "image/jpeg"}

`mtime` is integer milliseconds. `hash` and `magic` are optional and only
ever present on files. from_dict() rejects any shape violation with
CorruptIdentityError so callers can treat "malformed" as one case.
"""

from __future__ import annotations

import uuid as uuid_module
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from mediabox.config import CONTENT_HASH_PATTERN, ENTRY_TYPE_DIRECTORY, ENTRY_TYPE_FILE
from mediabox.core.errors import CorruptIdentityError


class EntryType(str, Enum):
    """Filesystem entry kinds that can carry an identity."""

    FILE = ENTRY_TYPE_FILE
    DIRECTORY = ENTRY_TYPE_DIRECTORY


@dataclass(frozen=True)
class FileIdentity:
    """Identity of one path instance, invalidated whenever mtime changes."""

    uuid: str
    type: EntryType
    name: str
    mtime: int
    hash: str | None = None
    magic: str | None = None

    @classmethod
    def create(cls, entry_type: EntryType, name: str, mtime: int) -> FileIdentity:
        """Build a fresh record with a new random uuid and no content fields."""
        return cls(uuid=str(uuid_module.uuid4()), type=entry_type, name=name, mtime=mtime)

    @classmethod
    def from_dict(cls, data: Any) -> FileIdentity:
        """Validate and convert a decoded attribute value.

        Raises:
            CorruptIdentityError: On any missing field or wrong type/format.

        """
        if not isinstance(data, dict):
            raise CorruptIdentityError("identity record is not an object")

        raw_uuid = data.get("uuid")
        if not isinstance(raw_uuid, str) or not _is_canonical_uuid(raw_uuid):
            raise CorruptIdentityError("identity record has an invalid uuid")

        try:
            entry_type = EntryType(data.get("type"))
        except ValueError:
            raise CorruptIdentityError("identity record has an invalid type") from None

        name = data.get("name")
        if not isinstance(name, str):
            raise CorruptIdentityError("identity record has an invalid name")

        mtime = data.get("mtime")
        if not isinstance(mtime, int) or isinstance(mtime, bool):
            raise CorruptIdentityError("identity record has an invalid mtime")

        content_hash = data.get("hash")
        magic = data.get("magic")
        if content_hash is not None:
            if not isinstance(content_hash, str) or not CONTENT_HASH_PATTERN.match(content_hash):
                raise CorruptIdentityError("identity record has an invalid hash")
        if magic is not None and not isinstance(magic, str):
            raise CorruptIdentityError("identity record has an invalid magic")
        if entry_type is EntryType.DIRECTORY and (content_hash is not None or magic is not None):
            raise CorruptIdentityError("directory identity carries content fields")

        return cls(
            uuid=raw_uuid,
            type=entry_type,
            name=name,
            mtime=mtime,
            hash=content_hash,
            magic=magic,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage; optional fields are omitted when unset."""
        data: dict[str, Any] = {
            "uuid": self.uuid,
            "type": self.type.value,
            "name": self.name,
            "mtime": self.mtime,
        }
        if self.hash is not None:
            data["hash"] = self.hash
        if self.magic is not None:
            data["magic"] = self.magic
        return data

    def with_content(self, content_hash: str, magic: str) -> FileIdentity:
        return replace(self, hash=content_hash, magic=magic)

    def with_name(self, name: str) -> FileIdentity:
        return self if name == self.name else replace(self, name=name)

    @property
    def is_file(self) -> bool:
        return self.type is EntryType.FILE

    @property
    def is_directory(self) -> bool:
        return self.type is EntryType.DIRECTORY


def _is_canonical_uuid(value: str) -> bool:
    try:
        return str(uuid_module.UUID(value)) == value
    except ValueError:
        return False
