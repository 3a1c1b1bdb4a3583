"""Small thread-safe TTL cache for board and roster lookups."""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)


class TTLCache:
    """Entries expire after ttl seconds; the oldest go first when full."""

    def __init__(
        self,
        ttl: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._data: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            expires_at, value = item
            if self._clock() >= expires_at:
                del self._data[key]
                logger.debug("Cache expired: %s", key)
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._data.pop(key, None)
            self._data[key] = (self._clock() + self.ttl, value)
            while len(self._data) > self.max_entries:
                self._data.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
