"""
Config Module - Black Box Interface

Purpose: Session and API configuration
Interface: SessionConfig, APIConfig, EnvConfigProvider, StaticConfigProvider
Hidden: Environment parsing and validation
"""

from .provider import (
    APIConfig,
    ConfigProvider,
    EnvConfigProvider,
    SessionConfig,
    StaticConfigProvider,
)

__all__ = [
    "APIConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "SessionConfig",
    "StaticConfigProvider",
]
