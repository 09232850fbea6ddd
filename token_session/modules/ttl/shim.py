"""
Backend TTL normalization.

Stores keep their default TTL in different places:

    (a) store.ttl                        redis-style stores
    (b) store.options.expiration         SQL-style stores
    (c) store.store.options.std_ttl      in-process cache (MemoryStore)

The value is shared by every session on that store instance, so a one-off
override is a save/write/restore sequence that must not interleave with
another override on the same store.
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, Optional, Protocol, Tuple

from ...errors import ConfigurationError

logger = logging.getLogger(__name__)


class TTLShim(Protocol):
    """Read the current TTL, or write a new one and return the previous value."""

    def __call__(self, store: Any, new_ttl: Optional[int] = None) -> Optional[int]:
        ...


_MISSING = object()


def _lookup(container: Any, name: str) -> Any:
    if container is None:
        return _MISSING
    if isinstance(container, dict):
        return container.get(name, _MISSING)
    return getattr(container, name, _MISSING)


def _assign(container: Any, name: str, value: Any) -> None:
    if isinstance(container, dict):
        container[name] = value
    else:
        setattr(container, name, value)


class ProbingTTLShim:
    """Default shim. Detects which of the known TTL locations a store exposes."""

    def locate(self, store: Any) -> Optional[Tuple[Any, str]]:
        """
        Find the object and attribute holding the store's TTL.

        Returns:
            (container, name) or None if the store has no known TTL location
        """
        if _lookup(store, "ttl") not in (_MISSING, None):
            return store, "ttl"

        options = _lookup(store, "options")
        if _lookup(options, "expiration") not in (_MISSING, None):
            return options, "expiration"

        inner_options = _lookup(_lookup(store, "store"), "options")
        if _lookup(inner_options, "std_ttl") not in (_MISSING, None):
            return inner_options, "std_ttl"

        return None

    def read(self, store: Any) -> Optional[int]:
        location = self.locate(store)
        if location is None:
            return None
        container, name = location
        return _lookup(container, name)

    def write(self, store: Any, ttl: int) -> Optional[int]:
        """Set the store's TTL. Returns the previous value, or None if unsupported."""
        location = self.locate(store)
        if location is None:
            return None
        container, name = location
        previous = _lookup(container, name)
        _assign(container, name, ttl)
        return previous

    def __call__(self, store: Any, new_ttl: Optional[int] = None) -> Optional[int]:
        if new_ttl is None:
            return self.read(store)
        return self.write(store, new_ttl)


default_ttl_shim = ProbingTTLShim()


def resolve_shim(ttl_shim: Optional[Callable] = None) -> Callable:
    """
    Validate a custom shim or fall back to the probing one.

    Raises:
        ConfigurationError: If ttl_shim is given but not callable
    """
    if ttl_shim is None:
        return default_ttl_shim
    if not callable(ttl_shim):
        raise ConfigurationError("ttl_shim option must be a callable")
    return ttl_shim


class StoreTTLLock:
    """
    Shared/exclusive lock over one store's default TTL.

    Plain writes and touches hold it shared, so they run concurrently but
    never while an override is active. Overrides hold it exclusively and
    take precedence over newly arriving shared holders.
    """

    def __init__(self):
        self._cond = asyncio.Condition()
        self._shared = 0
        self._overriding = False
        self._waiting_overrides = 0

    @asynccontextmanager
    async def shared(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._overriding and not self._waiting_overrides)
            self._shared += 1
        try:
            yield
        finally:
            async with self._cond:
                self._shared -= 1
                self._cond.notify_all()

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        async with self._cond:
            self._waiting_overrides += 1
            try:
                await self._cond.wait_for(lambda: not self._overriding and not self._shared)
            finally:
                self._waiting_overrides -= 1
                self._cond.notify_all()
            self._overriding = True
        try:
            yield
        finally:
            async with self._cond:
                self._overriding = False
                self._cond.notify_all()


# Keyed by id(store) so unhashable and __slots__ stores work too.
# Shared by every guard so managers wrapping the same store serialize together.
_store_locks: Dict[int, StoreTTLLock] = {}


def _forget(key: int) -> None:
    _store_locks.pop(key, None)


class TTLOverrideGuard:
    """
    Serializes TTL overrides per store instance.

    Usage:
        async with guard.override(store, 60):
            await store.set(sid, envelope)

        async with guard.default_ttl(store):
            await store.set(sid, envelope)
    """

    def __init__(self, shim: Callable):
        self.shim = shim

    def lock_for(self, store: Any) -> StoreTTLLock:
        key = id(store)
        lock = _store_locks.get(key)
        if lock is None:
            lock = StoreTTLLock()
            _store_locks[key] = lock
            try:
                weakref.finalize(store, _forget, key)
            except TypeError:
                # Not weak-referenceable: the entry lives as long as the process
                pass
        return lock

    def default_ttl(self, store: Any):
        """Context for operations that rely on the store's default TTL."""
        return self.lock_for(store).shared()

    @asynccontextmanager
    async def override(self, store: Any, ttl: int) -> AsyncIterator[Optional[int]]:
        """
        Apply ttl to the store for the duration of the block.

        Yields:
            The previous TTL, or None if the shim cannot locate one (no-op)
        """
        async with self.lock_for(store).exclusive():
            previous = self.shim(store)
            if previous is None:
                logger.debug(f"TTL override ignored: no TTL setting found on {type(store).__name__}")
                yield None
                return

            self.shim(store, ttl)
            try:
                yield previous
            finally:
                self.shim(store, previous)
