"""Ordered fan-out of configuration changes to registered callbacks."""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable
from typing import Any

from dynoconf.common import create_logger

logger = create_logger("sync")

type UpdateCallback = Callable[[str, Any], None]


class UpdateNotifier:
    """Invokes callbacks in registration order for every change event.

    Each callback receives its own deep copy of the value. A failing callback
    is logged and skipped; later callbacks still run.
    """

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._callbacks: list[UpdateCallback] = []

    def add(self, callback: UpdateCallback) -> None:
        with self._lock:
            self._callbacks.append(callback)

    def remove(self, callback: UpdateCallback) -> bool:
        """Remove the first registration of ``callback``; False if it was not registered."""
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                return False
            return True

    def notify(self, key: str, value: Any) -> None:
        with self._lock:
            for callback in list(self._callbacks):
                try:
                    callback(key, copy.deepcopy(value))
                except Exception:
                    logger.opt(exception=True).error(
                        "Update callback failed",
                        key=key,
                        callback=getattr(callback, "__qualname__", repr(callback)),
                    )

    def __len__(self) -> int:
        with self._lock:
            return len(self._callbacks)
