"""A thread-safe key/value store shared by the tasks of a flow."""

from __future__ import annotations

import threading
from typing import Any


class DataSet:
    """Key/value data guarded by a lock."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def set(self, key: str, data: Any) -> DataSet:
        """Store ``data`` under ``key`` and return the data set."""
        with self._lock:
            self._data[key] = data
        return self

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        with self._lock:
            return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __str__(self) -> str:
        with self._lock:
            return "".join(f"key={key},value={value}" for key, value in self._data.items())