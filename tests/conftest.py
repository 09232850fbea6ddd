"""
Shared pytest fixtures for token-session tests.

This module provides:
- RecordingStore / TouchingStore: in-memory stores that log every call
- Redis mocks for RedisStore tests
- Manager fixtures over those stores
"""

import asyncio
import copy
import os
import sys
from typing import Any, Dict, List, Optional, Set, Tuple
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from token_session.errors import StoreError
from token_session.modules.session import SessionManager
from token_session.modules.store import MemoryStore


# =============================================================================
# Recording stores
# =============================================================================

class RecordingStore:
    """
    Dictionary-backed store without touch support.

    Every call is appended to ``calls`` as (operation, sid). The TTL in effect
    at each set is appended to ``ttl_at_set``. Operations named in ``fail_on``
    raise StoreError.
    """

    def __init__(self, ttl: int = 1800, delay: float = 0):
        self.ttl = ttl
        self.delay = delay
        self.data: Dict[str, Dict[str, Any]] = {}
        self.calls: List[Tuple[str, str]] = []
        self.ttl_at_set: List[Optional[int]] = []
        self.fail_on: Set[str] = set()

    async def _enter(self, op: str, sid: str) -> None:
        self.calls.append((op, sid))
        if self.delay:
            await asyncio.sleep(self.delay)
        if op in self.fail_on:
            raise StoreError(f"{op} failed", sid=sid)

    async def get(self, sid):
        await self._enter("get", sid)
        value = self.data.get(sid)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, sid, envelope):
        self.ttl_at_set.append(getattr(self, "ttl", None))
        await self._enter("set", sid)
        self.data[sid] = copy.deepcopy(envelope)

    async def destroy(self, sid):
        await self._enter("destroy", sid)
        self.data.pop(sid, None)

    def ops(self, name: str) -> List[str]:
        """Sids passed to a given operation, in call order."""
        return [sid for op, sid in self.calls if op == name]


class TouchingStore(RecordingStore):
    """RecordingStore that also supports touch."""

    async def touch(self, sid, envelope):
        await self._enter("touch", sid)


# =============================================================================
# Store and manager fixtures
# =============================================================================

@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def touching_store():
    return TouchingStore()


@pytest.fixture
def manager(touching_store):
    """SessionManager over a TouchingStore."""
    return SessionManager(store=touching_store)


@pytest_asyncio.fixture
async def memory_store():
    """MemoryStore with the sweep disabled."""
    store = MemoryStore(expires=1800, check_period=0)
    yield store
    await store.close()


@pytest_asyncio.fixture
async def memory_manager(memory_store):
    """SessionManager over a MemoryStore."""
    manager = SessionManager(store=memory_store)
    yield manager
    await manager.close()


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

@pytest.fixture
def mock_redis():
    """Create a mock async Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.expire = AsyncMock(return_value=True)
    redis.aclose = AsyncMock()
    return redis


@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory data storage for more realistic tests.

    This allows testing code that reads back what it writes.
    """
    storage = {}
    expiries = {}

    redis = AsyncMock()

    async def mock_set(key, value, ex=None, **kwargs):
        storage[key] = value
        expiries[key] = ex
        return True

    async def mock_get(key):
        return storage.get(key)

    async def mock_delete(*keys):
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                expiries.pop(key, None)
                count += 1
        return count

    async def mock_expire(key, seconds):
        if key not in storage:
            return False
        expiries[key] = seconds
        return True

    redis.set = mock_set
    redis.get = mock_get
    redis.delete = mock_delete
    redis.expire = mock_expire
    redis._storage = storage
    redis._expiries = expiries

    return redis


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring infrastructure"
    )
