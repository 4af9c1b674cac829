"""In-process challenge store with TTL expiry.

Used when no REDIS_URI is configured and in tests. Entries only live in
the current process, so run a single worker when relying on it.

Expired entries are dropped lazily on access; a full sweep runs from ``set``
at most once per ``sweep_interval`` seconds.
The clock is injectable so expiry can be tested without sleeping.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from infrastructure.cache.protocol import StoredValue


class MemoryChallengeStore:
    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: float = 60.0,
    ) -> None:
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval
        self._entries: dict[str, tuple[StoredValue, float]] = {}  # key -> (value, expires_at)

    async def get(self, key: str) -> Optional[StoredValue]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int) -> None:
        self._maybe_sweep()
        self._entries[key] = (value, self._clock() + ttl)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def pop(self, key: str) -> Optional[StoredValue]:
        entry = self._entries.pop(key, None)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            return None
        return value

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() < entry[1]

    def _cleanup(self) -> None:
        now = self._clock()
        expired = [k for k, (_, exp) in self._entries.items() if now >= exp]
        for k in expired:
            del self._entries[k]

    def _maybe_sweep(self) -> None:
        now = self._clock()
        if now < self._next_sweep:
            return
        self._next_sweep = now + self._sweep_interval
        self._cleanup()
