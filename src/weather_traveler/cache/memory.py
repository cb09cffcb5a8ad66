"""In-process TTL cache with the same JSON interface as RedisCache."""
from __future__ import annotations

import copy
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class MemoryCache:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, Any]] = {}  # key -> (expires_at, value)

    def get_json(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return copy.deepcopy(value)

    def set_json(self, key: str, value: Any, ttl: int) -> None:
        with self._lock:
            now = self._clock()
            for stale in [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]:
                del self._entries[stale]
            self._entries[key] = (now + ttl, copy.deepcopy(value))

    def __len__(self) -> int:
        return len(self._entries)
