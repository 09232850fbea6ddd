import re

import pytest

from token_session.errors import ConfigurationError
from token_session.modules.idgen import generate_session_id, resolve_generator
from token_session.modules.session import SessionManager

URL_SAFE = re.compile(r"^[A-Za-z0-9_-]+$")


def test_generate_session_id_format():
    """24 random bytes encode to 32 URL-safe characters with no padding."""
    sid = generate_session_id()

    assert isinstance(sid, str)
    assert len(sid) == 32
    assert URL_SAFE.match(sid)
    assert "=" not in sid


def test_generate_session_id_unique():
    """10,000 ids contain no duplicates."""
    ids = {generate_session_id() for _ in range(10_000)}
    assert len(ids) == 10_000


def test_resolve_generator_default():
    assert resolve_generator() is generate_session_id
    assert resolve_generator(None) is generate_session_id


def test_resolve_generator_custom():
    custom = lambda: "fixed-id"
    assert resolve_generator(custom) is custom


@pytest.mark.parametrize("bad", ["not-callable", 42, object()])
def test_resolve_generator_rejects_non_callable(bad):
    with pytest.raises(ConfigurationError):
        resolve_generator(bad)


def test_manager_rejects_non_callable_generator(touching_store):
    """Invalid generator fails at construction, not on first use."""
    with pytest.raises(ConfigurationError, match="id_generator"):
        SessionManager(store=touching_store, id_generator="abc")


def test_configuration_error_is_type_error(touching_store):
    with pytest.raises(TypeError):
        SessionManager(store=touching_store, id_generator=123)


@pytest.mark.asyncio
async def test_manager_uses_custom_generator(touching_store):
    counter = iter(range(100))
    manager = SessionManager(store=touching_store, id_generator=lambda: f"sid-{next(counter)}")

    assert await manager.create({"a": 1}) == "sid-0"
    assert await manager.generate_id() == "sid-1"
