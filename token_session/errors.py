"""
Error types shared by all token-session modules.

Absence of a session is never an error: reads of unknown ids return None
and destroys of unknown ids succeed.
"""

from typing import Optional


class SessionError(Exception):
    """Base class for token-session errors."""


class ConfigurationError(SessionError, TypeError):
    """Invalid option supplied at construction time (generator, shim, store, config)."""


class StoreError(SessionError):
    """
    Failure reported by a session backend.

    Args:
        message: Human readable description
        sid: Session id involved, when known
    """

    def __init__(self, message: str, sid: Optional[str] = None):
        super().__init__(message)
        self.sid = sid


__all__ = ["SessionError", "ConfigurationError", "StoreError"]
