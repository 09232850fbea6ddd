"""
Store Module - Black Box Interface

Purpose: Persist session envelopes
Interface: SessionStore protocol, MemoryStore, RedisStore
Hidden: Expiry bookkeeping, sweep scheduling, serialization

Any object exposing async get/set/destroy (and optionally touch) can be
used as a store without inheriting from anything here.
"""

from .interfaces import SessionStore, has_touch, validate_store
from .memory import CacheOptions, MemoryStore, TTLCache
from .redis_store import RedisStore

__all__ = [
    "SessionStore",
    "has_touch",
    "validate_store",
    "CacheOptions",
    "MemoryStore",
    "TTLCache",
    "RedisStore",
]
