#!/usr/bin/env python3
"""
token-session - Demo API

Thin orchestration layer that:
1. Loads configuration
2. Builds the session manager
3. Serves a small FastAPI app whose state lives in header-token sessions

All session logic is in the modules.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Body, FastAPI, Request

from token_session.config.provider import ConfigProvider, EnvConfigProvider
from token_session.logging_config import configure_logging
from token_session.modules.middleware import SESSION_ID_FIELD, create_session_middleware
from token_session.modules.session import SessionFactory

logger = logging.getLogger(__name__)


def create_app(config_provider: Optional[ConfigProvider] = None) -> FastAPI:
    """
    Build the demo application.

    Args:
        config_provider: Configuration source, environment by default
    """
    config_provider = config_provider or EnvConfigProvider()
    session_config = config_provider.get_session_config()
    manager = SessionFactory.build(config_provider)
    field = session_config.session_field_name

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Session API started with {session_config.store_backend} store")
        yield
        await manager.close()
        logger.info("Session API shutdown complete")

    app = FastAPI(title="token-session demo", version="0.1.0", lifespan=lifespan)
    app.state.session_manager = manager

    session_middleware = create_session_middleware(manager, session_config)

    @app.middleware("http")
    async def sessions(request: Request, call_next):
        return await session_middleware(request, call_next)

    def current(request: Request) -> Dict[str, Any]:
        return getattr(request.state, field)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/session")
    async def get_session(request: Request):
        session = current(request)
        return {k: v for k, v in session.items() if k != SESSION_ID_FIELD}

    @app.put("/session")
    async def update_session(request: Request, values: Dict[str, Any] = Body(...)):
        session = current(request)
        session.update(values)
        return {k: v for k, v in session.items() if k != SESSION_ID_FIELD}

    @app.post("/session/regenerate")
    async def regenerate_session(request: Request):
        session = current(request)
        payload = {k: v for k, v in session.items() if k != SESSION_ID_FIELD}
        new_sid = await manager.regenerate(session[SESSION_ID_FIELD], payload)
        session[SESSION_ID_FIELD] = new_sid
        return {"regenerated": True}

    @app.delete("/session")
    async def delete_session(request: Request):
        session = current(request)
        await manager.destroy(session[SESSION_ID_FIELD])
        setattr(request.state, field, None)
        return {"destroyed": True}

    return app


def main():
    config_provider = EnvConfigProvider()
    api_config = config_provider.get_api_config()
    configure_logging(api_config.log_level)
    uvicorn.run(
        create_app(config_provider),
        host=api_config.host,
        port=api_config.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
