"""Session store contract following Black Box Design principles."""
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from ...errors import ConfigurationError

REQUIRED_OPERATIONS = ("get", "set", "destroy")


@runtime_checkable
class SessionStore(Protocol):
    """Protocol every session backend satisfies. ``touch`` is optional."""

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        """Return the stored envelope, or None if absent or expired."""
        ...

    async def set(self, sid: str, envelope: Dict[str, Any]) -> None:
        """Store an envelope under sid using the backend's current TTL."""
        ...

    async def destroy(self, sid: str) -> None:
        """Remove sid. Unknown ids are not an error."""
        ...


def validate_store(store: Any) -> Any:
    """
    Check a store exposes the required operations.

    Raises:
        ConfigurationError: If get, set or destroy is missing or not callable
    """
    missing = [name for name in REQUIRED_OPERATIONS if not callable(getattr(store, name, None))]
    if missing:
        raise ConfigurationError(
            f"store {type(store).__name__} is missing required operations: {', '.join(missing)}"
        )
    return store


def has_touch(store: Any) -> bool:
    """Check whether the store supports refreshing TTL without a rewrite."""
    return callable(getattr(store, "touch", None))
