"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol

from ..errors import ConfigurationError

STORE_BACKENDS = ("memory", "redis")


@dataclass
class SessionConfig:
    """Session manager and middleware configuration."""
    store_backend: str = "memory"
    default_ttl: int = 1800
    check_period: int = 60
    auto_touch: bool = True
    header_name: str = "token-session"
    session_field_name: str = "session"
    key_prefix: str = "sess:"
    redis_url: str = "redis://localhost:6379/0"

    def __post_init__(self):
        if self.store_backend not in STORE_BACKENDS:
            raise ConfigurationError(
                f"Unknown session store backend {self.store_backend!r}. "
                f"Expected one of: {', '.join(STORE_BACKENDS)}"
            )
        if self.default_ttl <= 0:
            raise ConfigurationError("Session TTL must be a positive number of seconds")
        if self.check_period < 0:
            raise ConfigurationError("Session check period must not be negative")
        if not self.header_name:
            raise ConfigurationError("Session header name must not be empty")


@dataclass
class APIConfig:
    """Demo API configuration."""
    port: int
    host: str
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


def _int_env(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


def _bool_env(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration from environment variables."""
        return SessionConfig(
            store_backend=os.getenv("SESSION_STORE", "memory").lower(),
            default_ttl=_int_env("SESSION_TTL", "1800"),
            check_period=_int_env("SESSION_CHECK_PERIOD", "60"),
            auto_touch=_bool_env("SESSION_AUTO_TOUCH", "true"),
            header_name=os.getenv("SESSION_HEADER_NAME", "token-session"),
            session_field_name=os.getenv("SESSION_FIELD_NAME", "session"),
            key_prefix=os.getenv("SESSION_KEY_PREFIX", "sess:"),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=_int_env("API_PORT", "8080"),
            host=os.getenv("API_HOST", "0.0.0.0"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


class StaticConfigProvider:
    """Provider returning fixed configuration objects, used for tests and embedding."""

    def __init__(self, session_config: Optional[SessionConfig] = None, api_config: Optional[APIConfig] = None):
        self._session = session_config or SessionConfig()
        self._api = api_config or APIConfig(port=8080, host="127.0.0.1", log_level="INFO")

    def get_session_config(self) -> SessionConfig:
        return self._session

    def get_api_config(self) -> APIConfig:
        return self._api
