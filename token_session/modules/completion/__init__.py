"""
Completion Module - Black Box Interface

Purpose: Let every operation be awaited or observed through an error-first callback
Interface: dual_mode decorator, attach_callback()
Hidden: Task scheduling and callback dispatch
"""

from .completion import Callback, attach_callback, dual_mode

__all__ = ["Callback", "attach_callback", "dual_mode"]
