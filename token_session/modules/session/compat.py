"""
Deprecated operation names.

LegacySessionAdapter keeps the older camel-style API working on top of
SessionManager. Every call emits a DeprecationWarning and forwards to the
current operation; results may be awaited or received through callback=.
"""

import warnings
from typing import Any, Dict, Optional

from ..completion import dual_mode
from .session import SessionManager


def _deprecated(old: str, new: str) -> None:
    warnings.warn(
        f"{old}() is deprecated, use SessionManager.{new}() instead",
        DeprecationWarning,
        stacklevel=3,
    )


class LegacySessionAdapter:
    def __init__(self, manager: SessionManager):
        self.manager = manager

    def new_session_id(self, callback=None):
        _deprecated("new_session_id", "generate_id")
        return self.manager.generate_id(callback=callback)

    def new(self, data: Dict[str, Any], callback=None):
        """Returns {"sessionId": sid, "data": data}."""
        _deprecated("new", "create")
        return self._new(data, None, callback=callback)

    def new_wttl(self, data: Dict[str, Any], ttl: int, callback=None):
        _deprecated("new_wttl", "create")
        return self._new(data, ttl, callback=callback)

    @dual_mode
    async def _new(self, data: Dict[str, Any], ttl: Optional[int]) -> Dict[str, Any]:
        sid = await self.manager.create(data, ttl)
        return {"sessionId": sid, "data": data}

    def get(self, sid: str, callback=None):
        _deprecated("get", "read")
        return self.manager.read(sid, callback=callback)

    def get_n_touch(self, sid: str, callback=None):
        """Read and touch regardless of the manager's auto_touch setting."""
        _deprecated("get_n_touch", "read")
        return self._get_n_touch(sid, callback=callback)

    @dual_mode
    async def _get_n_touch(self, sid: str) -> Optional[Dict[str, Any]]:
        return await self.manager._read(sid, touch=True)

    def set(self, sid: str, data: Dict[str, Any], callback=None):
        _deprecated("set", "write")
        return self.manager.write(sid, data, callback=callback)

    def set_wttl(self, sid: str, data: Dict[str, Any], ttl: int, callback=None):
        _deprecated("set_wttl", "write")
        return self.manager.write(sid, data, ttl, callback=callback)

    def destroy(self, sid: str, callback=None):
        return self.manager.destroy(sid, callback=callback)

    def regenerate(self, sid: str, data: Dict[str, Any], callback=None):
        return self.manager.regenerate(sid, data, callback=callback)

    def touch(self, sid: str, data: Dict[str, Any], callback=None):
        return self.manager.touch(sid, data, callback=callback)
