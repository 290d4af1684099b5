"""Module: mediabox.config.identity

Author: Michael Economou
Date: 2026-10-19

Identity record settings: reserved attribute namespace and field formats.
"""

import re

# =====================================
# EXTENDED ATTRIBUTE
# =====================================

# One reserved attribute per path holds the JSON identity record
IDENTITY_XATTR_NAME = "user.mediabox"

# Linux caps a single attribute value at 64KiB; records are far smaller
IDENTITY_XATTR_MAX_BYTES = 4096

# =====================================
# RECORD FIELD FORMATS
# =====================================

ENTRY_TYPE_FILE = "file"
ENTRY_TYPE_DIRECTORY = "directory"

# Content hashes stored in identity records are sha256 hex digests
CONTENT_HASH_PATTERN = re.compile(r"^[0-9a-f]{64}$")

# Fallback magic when the MIME database cannot classify content
DEFAULT_MAGIC = "application/octet-stream"
