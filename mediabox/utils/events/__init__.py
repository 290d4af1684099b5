"""Module: __init__.py.

Author: Michael Economou
Date: 2026-10-19

Pure Python event/signal implementation used to decouple the content index
from the consumers that react to newly indexed content.
"""

from mediabox.utils.events.observable import Observable, Signal

__all__ = ["Observable", "Signal"]
