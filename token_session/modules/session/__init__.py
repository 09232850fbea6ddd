"""
Session Module - Black Box Interface

Purpose: Manage session lifecycle over a pluggable store
Interface: create(), read(), write(), touch(), destroy(), regenerate(), generate_id()
Hidden: Envelope format, TTL override sequencing, id generation

Every operation returns an awaitable Task and accepts an optional
error-first callback=.
"""

from .compat import LegacySessionAdapter
from .factory import SessionFactory
from .models import EnvelopeMetadata, SessionEnvelope
from .session import SessionManager

__all__ = [
    "EnvelopeMetadata",
    "LegacySessionAdapter",
    "SessionEnvelope",
    "SessionFactory",
    "SessionManager",
]
