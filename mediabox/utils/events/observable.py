"""Module: observable.py.

Author: Michael Economou
Date: 2026-10-19

Observable - Observer pattern with a Qt-signal-like surface.

    class ContentIndex(Observable):
        content_indexed = Signal(str, str, str)

    index.content_indexed.connect(on_indexed)
    index.content_indexed.emit(content_hash, path, magic)

Emission calls the connected callbacks synchronously on the emitting thread,
in connection order. A failing callback is logged and does not stop the rest.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from mediabox.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

__all__ = ["Observable", "Signal", "SignalInstance"]


class Signal:
    """Class-level descriptor; each owner instance gets its own SignalInstance."""

    def __init__(self, *arg_types: type):
        self.arg_types = arg_types
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, _objtype: type | None = None) -> Any:
        if obj is None:
            return self

        attr_name = f"_signal_{self.name}"
        instance = obj.__dict__.get(attr_name)
        if instance is None:
            instance = SignalInstance(self.name, self.arg_types)
            obj.__dict__[attr_name] = instance
        return instance


class SignalInstance:
    """Connected callbacks of one signal on one object."""

    def __init__(self, name: str, arg_types: tuple[type, ...]):
        self.name = name
        self.arg_types = arg_types
        self._callbacks: list[Callable[..., Any]] = []
        self._lock = threading.Lock()

    def connect(self, callback: Callable[..., Any]) -> None:
        """Connect callback; connecting the same callback twice is a no-op."""
        with self._lock:
            if callback not in self._callbacks:
                self._callbacks.append(callback)
        logger.debug(
            "Signal connected: %s -> %s",
            self.name,
            getattr(callback, "__name__", repr(callback)),
            extra={"dev_only": True},
        )

    def disconnect(self, callback: Callable[..., Any] | None = None) -> None:
        """Disconnect callback, or every callback when None."""
        with self._lock:
            if callback is None:
                self._callbacks.clear()
            elif callback in self._callbacks:
                self._callbacks.remove(callback)

    def receiver_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def emit(self, *args: Any) -> None:
        """Call every connected callback with args."""
        with self._lock:
            callbacks = self._callbacks.copy()

        for callback in callbacks:
            try:
                callback(*args)
            except Exception:
                logger.exception(
                    "Error in signal callback: %s -> %s",
                    self.name,
                    getattr(callback, "__name__", repr(callback)),
                )


class Observable:
    """Base class for objects exposing Signal descriptors."""
