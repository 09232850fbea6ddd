"""
Redis session store.

Envelopes are stored as JSON strings under ``{prefix}{sid}`` with a TTL
taken from ``self.ttl`` at write time.
"""

import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ...errors import StoreError

logger = logging.getLogger(__name__)


class RedisStore:
    def __init__(self, redis_client, prefix: str = "sess:", ttl: int = 1800):
        """
        Initialize Redis store.

        Args:
            redis_client: Async Redis client (decode_responses=True expected)
            prefix: Key prefix for session entries
            ttl: Default session TTL in seconds
        """
        self.redis = redis_client
        self.prefix = prefix
        self.ttl = ttl

    @classmethod
    def from_url(cls, url: str, prefix: str = "sess:", ttl: int = 1800, **kwargs) -> "RedisStore":
        """Build a store with its own client from a redis:// URL."""
        client = redis.from_url(url, encoding="utf-8", decode_responses=True, **kwargs)
        return cls(client, prefix=prefix, ttl=ttl)

    def _key(self, sid: str) -> str:
        return f"{self.prefix}{sid}"

    def _expiry(self) -> Optional[int]:
        # A zero or missing ttl stores without expiry
        return self.ttl if self.ttl and self.ttl > 0 else None

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        try:
            data = await self.redis.get(self._key(sid))
        except RedisError as e:
            raise StoreError(f"Redis get failed: {e}", sid=sid) from e

        if not data:
            return None
        try:
            return json.loads(data)
        except ValueError as e:
            raise StoreError(f"Corrupt session payload for {sid}", sid=sid) from e

    async def set(self, sid: str, envelope: Dict[str, Any]) -> None:
        try:
            await self.redis.set(self._key(sid), json.dumps(envelope), ex=self._expiry())
        except RedisError as e:
            raise StoreError(f"Redis set failed: {e}", sid=sid) from e

    async def destroy(self, sid: str) -> None:
        try:
            await self.redis.delete(self._key(sid))
        except RedisError as e:
            raise StoreError(f"Redis delete failed: {e}", sid=sid) from e

    async def touch(self, sid: str, envelope: Dict[str, Any]) -> None:
        if self._expiry() is None:
            return
        try:
            await self.redis.expire(self._key(sid), self.ttl)
        except RedisError as e:
            raise StoreError(f"Redis expire failed: {e}", sid=sid) from e

    async def close(self) -> None:
        await self.redis.aclose()
