"""Threading helpers."""

from mediabox.utils.threading.callback_dispatcher import CallbackDispatcher

__all__ = ["CallbackDispatcher"]
