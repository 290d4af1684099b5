"""Boot layer - Composition root.

This package is the only place where the concrete pipeline pieces (disk
cache, Qt renderer, generation queue, content index) are instantiated from
settings and wired together. Library users and the command line get a
ready Thumbnailer through create_thumbnailer().

Author: Michael Economou
Date: 2026-10-19
"""

from __future__ import annotations

from mediabox.boot.app_factory import (
    MediaboxApp,
    create_app,
    create_content_index,
    create_thumbnailer,
    init_logging,
)

__all__ = [
    "MediaboxApp",
    "create_app",
    "create_content_index",
    "create_thumbnailer",
    "init_logging",
]
