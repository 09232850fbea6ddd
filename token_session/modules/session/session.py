import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, Optional

from ..completion import dual_mode
from ..idgen import resolve_generator
from ..store import MemoryStore, has_touch, validate_store
from ..ttl import TTLOverrideGuard, resolve_shim
from .models import SessionEnvelope

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        store: Optional[Any] = None,
        id_generator: Optional[Callable[[], str]] = None,
        auto_touch: bool = True,
        ttl_shim: Optional[Callable] = None,
    ):
        """
        Initialize session manager.

        Args:
            store: Backend exposing async get/set/destroy and optional touch.
                Defaults to a MemoryStore (TTL 1800s, sweep every 60s).
            id_generator: Zero-argument callable returning a new session id
            auto_touch: Refresh TTL whenever read() finds a session
            ttl_shim: Callable (store, new_ttl=None) -> current/previous TTL

        Raises:
            ConfigurationError: If id_generator or ttl_shim is not callable,
                or store lacks a required operation
        """
        self.generate_session_id = resolve_generator(id_generator)
        self.ttl_shim = resolve_shim(ttl_shim)
        self.store = validate_store(store) if store is not None else MemoryStore(expires=1800, check_period=60)
        self.auto_touch = auto_touch
        self._ttl_guard = TTLOverrideGuard(self.ttl_shim)

    @property
    def ttl(self) -> Optional[int]:
        """Current default TTL of the store, or None if it exposes none."""
        return self.ttl_shim(self.store)

    async def _get(self, sid: str) -> Optional[Dict[str, Any]]:
        raw = await self.store.get(sid)
        if raw is None:
            return None
        return SessionEnvelope.from_store(sid, raw).data

    async def _read(self, sid: str, touch: bool) -> Optional[Dict[str, Any]]:
        data = await self._get(sid)
        if data is not None and touch:
            try:
                await self._touch(sid, data)
            except Exception as e:
                logger.warning(f"Auto-touch failed for session {sid[:8]}...: {e}")
        return data

    async def _write(self, sid: str, payload: Dict[str, Any], ttl: Optional[int] = None) -> Dict[str, Any]:
        envelope = SessionEnvelope.wrap(payload, ttl).to_store()
        if ttl is None:
            async with self._ttl_guard.default_ttl(self.store):
                await self.store.set(sid, envelope)
        else:
            async with self._ttl_guard.override(self.store, ttl):
                await self.store.set(sid, envelope)
        return payload

    async def _touch(self, sid: str, payload: Dict[str, Any]) -> None:
        if not has_touch(self.store):
            return
        envelope = SessionEnvelope.wrap(payload).to_store()
        async with self._ttl_guard.default_ttl(self.store):
            await self.store.touch(sid, envelope)

    @dual_mode
    async def generate_id(self) -> str:
        """Generate a session id, always yielding to the event loop first."""
        sid = self.generate_session_id()
        await asyncio.sleep(0)
        return sid

    @dual_mode
    async def create(self, payload: Dict[str, Any], ttl: Optional[int] = None) -> str:
        """
        Store payload under a newly generated id.

        Not retry-safe: every call mints a new id. Pre-generate an id and
        use write() when retries are needed.

        Returns:
            The new session id
        """
        sid = self.generate_session_id()
        await self._write(sid, payload, ttl)
        logger.debug(f"Created session {sid[:8]}...")
        return sid

    @dual_mode
    async def read(self, sid: str) -> Optional[Dict[str, Any]]:
        """
        Fetch a session payload.

        Returns:
            Payload dict, or None if the session does not exist
        """
        return await self._read(sid, touch=self.auto_touch)

    @dual_mode
    async def write(self, sid: str, payload: Dict[str, Any], ttl: Optional[int] = None) -> Dict[str, Any]:
        """
        Store payload under sid.

        Args:
            sid: Session id
            payload: Session data
            ttl: One-off TTL in seconds. The store's default TTL is restored
                once the write completes.

        Returns:
            The payload as written
        """
        return await self._write(sid, payload, ttl)

    @dual_mode
    async def destroy(self, sid: str) -> None:
        """Remove a session. Unknown ids are not an error."""
        await self.store.destroy(sid)
        logger.debug(f"Destroyed session {sid[:8]}...")

    @dual_mode
    async def regenerate(self, sid: str, payload: Dict[str, Any]) -> str:
        """
        Move payload to a fresh id and invalidate the old one.

        If destroying the old session fails nothing else happens. If the
        write under the new id fails, the old session is already gone and
        the write error is raised.

        Returns:
            The new session id
        """
        await self.store.destroy(sid)
        new_sid = self.generate_session_id()
        await self._write(new_sid, payload)
        logger.debug(f"Regenerated session {sid[:8]}... as {new_sid[:8]}...")
        return new_sid

    @dual_mode
    async def touch(self, sid: str, payload: Dict[str, Any]) -> None:
        """Refresh a session's TTL. A no-op when the store has no touch."""
        await self._touch(sid, payload)

    async def close(self) -> None:
        """Release store resources (sweep task, connections)."""
        close = getattr(self.store, "close", None)
        if callable(close):
            result = close()
            if inspect.isawaitable(result):
                await result

    async def __aenter__(self) -> "SessionManager":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
