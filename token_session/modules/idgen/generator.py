import base64
import secrets
from typing import Callable, Optional

from ...errors import ConfigurationError

SESSION_ID_BYTES = 24


def generate_session_id() -> str:
    """
    Generate a new session id.

    Returns:
        24 random bytes encoded as URL-safe base64 without padding (32 chars)
    """
    raw = secrets.token_bytes(SESSION_ID_BYTES)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def resolve_generator(id_generator: Optional[Callable[[], str]] = None) -> Callable[[], str]:
    """
    Validate a custom generator or fall back to the built-in one.

    Raises:
        ConfigurationError: If id_generator is given but not callable
    """
    if id_generator is None:
        return generate_session_id
    if not callable(id_generator):
        raise ConfigurationError("id_generator option must be a callable")
    return id_generator
