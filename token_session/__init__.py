"""
token-session - Header Token Session Management

Session state for APIs that carry the session id in a request header
instead of a cookie.

Architecture:
- Each module is self-contained with clear interfaces
- Stores are duck-typed and completely replaceable
- Every operation can be awaited or observed through an error-first callback

Modules:
- idgen: Session id generation
- store: Session persistence (memory, Redis, or any compatible object)
- ttl: Backend TTL normalization and one-off overrides
- completion: Awaitable/callback dual completion
- session: Session lifecycle management
- middleware: FastAPI/Starlette request integration
"""

from .errors import ConfigurationError, SessionError, StoreError
from .modules.middleware import SessionMiddleware, create_session_middleware
from .modules.session import LegacySessionAdapter, SessionFactory, SessionManager
from .modules.store import MemoryStore, RedisStore

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "LegacySessionAdapter",
    "MemoryStore",
    "RedisStore",
    "SessionError",
    "SessionFactory",
    "SessionManager",
    "SessionMiddleware",
    "StoreError",
    "create_session_middleware",
]
