"""
In-process session store with TTL expiry and a periodic sweep.

The TTL used for an entry is read from ``store.store.options.std_ttl`` at
write time, which is the nested location the TTL shim looks up for this store.
"""

import asyncio
import copy
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL = 1800
DEFAULT_CHECK_PERIOD = 60


@dataclass
class CacheOptions:
    """Expiry settings for TTLCache."""
    std_ttl: int = DEFAULT_TTL
    check_period: int = DEFAULT_CHECK_PERIOD


class TTLCache:
    """Dictionary of values with per-entry deadlines."""

    def __init__(self, options: Optional[CacheOptions] = None, clock=time.monotonic):
        self.options = options or CacheOptions()
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}

    def _deadline(self) -> Optional[float]:
        ttl = self.options.std_ttl
        if not ttl or ttl <= 0:
            return None
        return self._clock() + ttl

    def _expired(self, deadline: Optional[float]) -> bool:
        return deadline is not None and self._clock() >= deadline

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, deadline = entry
        if self._expired(deadline):
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: Any) -> None:
        self._entries[key] = (value, self._deadline())

    def refresh(self, key: str) -> bool:
        """Reset an entry's deadline. Returns False if the key is absent or expired."""
        value = self.get(key)
        if value is None:
            return False
        self._entries[key] = (value, self._deadline())
        return True

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def sweep(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        expired = [k for k, (_, deadline) in self._entries.items() if self._expired(deadline)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def items(self):
        for key in list(self._entries):
            value = self.get(key)
            if value is not None:
                yield key, value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return sum(1 for _ in self.items())


class MemoryStore:
    """
    Default session store.

    Suitable for development, testing, and single-process deployments.
    Entries are deep-copied on the way in and out.
    """

    def __init__(self, expires: int = DEFAULT_TTL, check_period: int = DEFAULT_CHECK_PERIOD, clock=time.monotonic):
        """
        Initialize memory store.

        Args:
            expires: Default TTL in seconds (0 disables expiry)
            check_period: Seconds between sweeps of expired entries (0 disables the sweep)
            clock: Monotonic time source, injectable for tests
        """
        self.store = TTLCache(CacheOptions(std_ttl=expires, check_period=check_period), clock=clock)
        self._sweeper: Optional[asyncio.Task] = None

    def _ensure_sweeper(self) -> None:
        if self._sweeper is not None and not self._sweeper.done():
            return
        if self.store.options.check_period and self.store.options.check_period > 0:
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_loop())

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.store.options.check_period)
            removed = self.store.sweep()
            if removed:
                logger.debug(f"Swept {removed} expired sessions")

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        self._ensure_sweeper()
        value = self.store.get(sid)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, sid: str, envelope: Dict[str, Any]) -> None:
        self._ensure_sweeper()
        self.store.put(sid, copy.deepcopy(envelope))

    async def destroy(self, sid: str) -> None:
        self.store.delete(sid)

    async def touch(self, sid: str, envelope: Dict[str, Any]) -> None:
        self._ensure_sweeper()
        self.store.refresh(sid)

    async def all(self) -> Dict[str, Dict[str, Any]]:
        """Get every live session envelope keyed by id."""
        return {sid: copy.deepcopy(value) for sid, value in self.store.items()}

    async def length(self) -> int:
        return len(self.store)

    async def clear(self) -> None:
        self.store.clear()

    async def close(self) -> None:
        """Stop the sweep task."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            try:
                await self._sweeper
            except asyncio.CancelledError:
                pass
            self._sweeper = None
