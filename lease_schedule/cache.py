"""In-process cache holding the last parsed batch for a fixed lifetime."""

from __future__ import annotations

import threading
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    def __init__(self, ttl: timedelta, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl.total_seconds() <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self._clock = clock
        self._items: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            expires_at, value = item
            if self._clock() >= expires_at:
                del self._items[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._items[key] = (self._clock() + self.ttl.total_seconds(), value)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
