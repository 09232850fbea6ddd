"""
Session Middleware Module - Black Box Interface

Purpose: Load the request's session before the handler and commit it after
Interface: SessionMiddleware, create_session_middleware(), session_checksum()
Hidden: Header handling, dirty checking, commit strategy

Register with any FastAPI/Starlette app:

    session_middleware = create_session_middleware(manager)

    @app.middleware("http")
    async def sessions(request, call_next):
        return await session_middleware(request, call_next)

Handlers use ``request.state.session`` (a dict). Setting it to None tells
the middleware the session was destroyed and must not be committed.
"""

import json
import logging
import zlib
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

SESSION_ID_FIELD = "session_id"


def session_checksum(session: Dict[str, Any]) -> int:
    """CRC32 of the session serialized with sorted keys."""
    serialized = json.dumps(session, sort_keys=True, separators=(",", ":"), default=str)
    return zlib.crc32(serialized.encode("utf-8"))


class SessionMiddleware:
    """
    Header-token session middleware with dirty checking.

    Unchanged sessions are touched instead of rewritten. A new session is
    always written, and its id is returned in the same header it is read from.
    """

    def __init__(
        self,
        manager,
        header_name: str = "token-session",
        session_field_name: str = "session",
        skip_paths: Optional[Dict[str, list]] = None,
        error_format: str = "json",
        log_attempts: bool = True,
    ):
        """
        Initialize session middleware.

        Args:
            manager: SessionManager used for read/write/touch
            header_name: Header carrying the session id in both directions
            session_field_name: Attribute of request.state holding the session dict
            skip_paths: Dict of {path: [methods]} to run without a session
            error_format: Error response format ("json" or "jsonrpc")
            log_attempts: Whether to log session decisions at debug level
        """
        self.manager = manager
        self.header_name = header_name
        self.session_field_name = session_field_name
        self.skip_paths = skip_paths or {}
        self.error_format = error_format
        self.log_attempts = log_attempts

    def should_skip(self, request: Request) -> bool:
        """Check if session handling should be skipped for this request."""
        path = str(request.url.path)
        method = request.method.upper()

        if path in self.skip_paths:
            allowed_methods = self.skip_paths[path]
            if "*" in allowed_methods or method in allowed_methods:
                return True

        return False

    def format_error(self, status_code: int, message: str, request_id: Optional[str] = None) -> Dict[str, Any]:
        """Format error response based on configured format."""
        if self.error_format == "jsonrpc":
            return {
                "jsonrpc": "2.0",
                "error": {"code": -32603, "message": message},
                "id": request_id,
            }
        return {"error": message, "status": status_code}

    async def load(self, request: Request) -> tuple:
        """
        Resolve the session for a request.

        Returns:
            (sid, session, baseline_checksum). baseline is None for a new session,
            so a new session is always written on its first response, even untouched.
        """
        inbound_sid = request.headers.get(self.header_name)
        session = None
        if inbound_sid:
            session = await self.manager.read(inbound_sid)

        if session is None:
            sid = await self.manager.generate_id()
            if self.log_attempts:
                reason = "not found" if inbound_sid else "no token"
                logger.debug(f"Starting new session {sid[:8]}... ({reason})")
            session = {SESSION_ID_FIELD: sid}
            return sid, session, None

        session[SESSION_ID_FIELD] = inbound_sid
        return inbound_sid, session, session_checksum(session)

    async def commit(self, sid: str, session: Dict[str, Any], baseline: Optional[int]) -> str:
        """
        Persist the session after the handler ran.

        Returns:
            The id the session was committed under
        """
        current = session_checksum(session)
        sid = session.pop(SESSION_ID_FIELD, None) or sid

        if baseline is None or current != baseline:
            if self.log_attempts:
                logger.debug(f"Session {sid[:8]}... changed, writing")
            await self.manager.write(sid, session)
            return sid

        try:
            await self.manager.touch(sid, session)
        except Exception as e:
            logger.warning(f"Session touch failed for {sid[:8]}...: {e}")
        return sid

    async def __call__(self, request: Request, call_next):
        """Process the request through session middleware."""
        if self.should_skip(request):
            if self.log_attempts:
                logger.debug(f"Skipping session for {request.method} {request.url.path}")
            return await call_next(request)

        try:
            sid, session, baseline = await self.load(request)
        except Exception as e:
            logger.error(f"Error loading session: {e}")
            return JSONResponse(
                status_code=500,
                content=self.format_error(500, "Internal error while loading session"),
            )

        setattr(request.state, self.session_field_name, session)

        response = await call_next(request)

        session = getattr(request.state, self.session_field_name, None)
        if session is None:
            if self.log_attempts:
                logger.debug(f"Session {sid[:8]}... released by handler, not committing")
            return response

        try:
            committed_sid = await self.commit(sid, session, baseline)
        except Exception as e:
            logger.error(f"Error committing session {sid[:8]}...: {e}")
            return JSONResponse(
                status_code=500,
                content=self.format_error(500, "Internal error while saving session"),
            )

        if committed_sid != request.headers.get(self.header_name):
            response.headers[self.header_name] = committed_sid

        return response


def create_session_middleware(
    manager,
    config=None,
    skip_paths: Optional[Dict[str, list]] = None,
    error_format: str = "json",
) -> SessionMiddleware:
    """
    Factory function to create session middleware.

    Args:
        manager: SessionManager instance
        config: Optional SessionConfig supplying header and field names
        skip_paths: Paths to run without a session {"/path": ["GET"]}
        error_format: "json" or "jsonrpc" error format

    Returns:
        Configured SessionMiddleware instance
    """
    default_skip_paths = {"/health": ["GET"]}
    if skip_paths:
        default_skip_paths.update(skip_paths)

    options = {}
    if config is not None:
        options = {
            "header_name": config.header_name,
            "session_field_name": config.session_field_name,
        }

    return SessionMiddleware(
        manager,
        skip_paths=default_skip_paths,
        error_format=error_format,
        **options,
    )


__all__ = [
    "SESSION_ID_FIELD",
    "SessionMiddleware",
    "create_session_middleware",
    "session_checksum",
]
