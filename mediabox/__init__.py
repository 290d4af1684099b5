"""Module: mediabox.

Author: Michael Economou
Date: 2026-10-19

Persistent file identity and content-addressed thumbnail caching for the
mediabox personal media server.
"""

from mediabox.config.app import APP_NAME, APP_VERSION

__version__ = APP_VERSION

__all__ = ["APP_NAME", "APP_VERSION", "__version__"]
