"""Identity resolution on top of the extended attribute codec."""

from mediabox.core.identity.identity_resolver import (
    IdentityResolver,
    get_identity_resolver,
    read_identity,
    read_timestamp,
    update_file_hash,
)

__all__ = [
    "IdentityResolver",
    "get_identity_resolver",
    "read_identity",
    "read_timestamp",
    "update_file_hash",
]
