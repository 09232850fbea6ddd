"""
Session Factory following Black Box Design principles.

This factory:
- Builds the configured store
- Wires it into a SessionManager
- Returns only the manager
"""

import logging
from typing import Any, Callable, Optional

from ...config.provider import ConfigProvider, SessionConfig
from ..store import MemoryStore, RedisStore
from .session import SessionManager

logger = logging.getLogger(__name__)


class SessionFactory:
    """Composition root for the session stack."""

    @staticmethod
    def build_store(config: SessionConfig, redis_client: Optional[Any] = None) -> Any:
        """
        Build the store selected by config.

        Args:
            config: Session configuration
            redis_client: Existing async Redis client to reuse (redis backend only)
        """
        if config.store_backend == "redis":
            logger.info(f"Building Redis session store (ttl={config.default_ttl}s)")
            if redis_client is not None:
                return RedisStore(redis_client, prefix=config.key_prefix, ttl=config.default_ttl)
            return RedisStore.from_url(config.redis_url, prefix=config.key_prefix, ttl=config.default_ttl)

        logger.info(
            f"Building memory session store (ttl={config.default_ttl}s, sweep={config.check_period}s)"
        )
        return MemoryStore(expires=config.default_ttl, check_period=config.check_period)

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        redis_client: Optional[Any] = None,
        id_generator: Optional[Callable[[], str]] = None,
        ttl_shim: Optional[Callable] = None,
    ) -> SessionManager:
        """
        Build a SessionManager from configuration.

        Returns:
            SessionManager over the configured store
        """
        config = config_provider.get_session_config()
        store = SessionFactory.build_store(config, redis_client)
        return SessionManager(
            store=store,
            id_generator=id_generator,
            auto_touch=config.auto_touch,
            ttl_shim=ttl_shim,
        )
