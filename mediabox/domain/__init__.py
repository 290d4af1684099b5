"""Domain records (no I/O)."""

from mediabox.domain.identity import EntryType, FileIdentity

__all__ = ["EntryType", "FileIdentity"]
