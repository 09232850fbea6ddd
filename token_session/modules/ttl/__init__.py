"""
TTL Module - Black Box Interface

Purpose: Read and temporarily override a backend's default TTL
Interface: ProbingTTLShim, default_ttl_shim, resolve_shim(), TTLOverrideGuard
Hidden: Knowledge of where each backend keeps its TTL setting

Custom shims are plain callables ``shim(store, new_ttl=None) -> Optional[int]``.
"""

from .shim import (
    ProbingTTLShim,
    StoreTTLLock,
    TTLOverrideGuard,
    TTLShim,
    default_ttl_shim,
    resolve_shim,
)

__all__ = [
    "ProbingTTLShim",
    "StoreTTLLock",
    "TTLOverrideGuard",
    "TTLShim",
    "default_ttl_shim",
    "resolve_shim",
]
