"""
Id Generator Module - Black Box Interface

Purpose: Mint opaque session identifiers
Interface: generate_session_id(), resolve_generator()
Hidden: Entropy source and encoding

Replaceable with any zero-argument callable returning a string.
"""

from .generator import SESSION_ID_BYTES, generate_session_id, resolve_generator

__all__ = ["SESSION_ID_BYTES", "generate_session_id", "resolve_generator"]
