import asyncio
import logging

import pytest

from token_session.errors import StoreError
from token_session.modules.completion import attach_callback, dual_mode


class Ops:
    def __init__(self):
        self.runs = 0

    @dual_mode
    async def succeed(self, value):
        self.runs += 1
        await asyncio.sleep(0)
        return value

    @dual_mode
    async def fail(self):
        self.runs += 1
        raise StoreError("backend down")

    @dual_mode
    async def hang(self):
        await asyncio.sleep(3600)


class CallbackRecorder:
    def __init__(self):
        self.calls = []
        self.done = asyncio.Event()

    def __call__(self, error, result):
        self.calls.append((error, result))
        self.done.set()


@pytest.mark.asyncio
async def test_await_without_callback():
    ops = Ops()
    assert await ops.succeed(5) == 5
    assert ops.runs == 1


@pytest.mark.asyncio
async def test_callback_and_await_agree_on_success():
    ops = Ops()
    recorder = CallbackRecorder()

    result = await ops.succeed("ok", callback=recorder)
    await recorder.done.wait()

    assert result == "ok"
    assert recorder.calls == [(None, "ok")]
    assert ops.runs == 1


@pytest.mark.asyncio
async def test_callback_and_await_agree_on_failure():
    ops = Ops()
    recorder = CallbackRecorder()

    with pytest.raises(StoreError) as exc_info:
        await ops.fail(callback=recorder)
    await recorder.done.wait()

    assert len(recorder.calls) == 1
    error, result = recorder.calls[0]
    assert error is exc_info.value
    assert result is None
    assert ops.runs == 1


@pytest.mark.asyncio
async def test_callback_only_usage():
    """The operation runs even if the returned task is discarded."""
    ops = Ops()
    recorder = CallbackRecorder()

    ops.succeed(42, callback=recorder)
    await asyncio.wait_for(recorder.done.wait(), timeout=1)

    assert recorder.calls == [(None, 42)]


@pytest.mark.asyncio
async def test_callback_fires_once_when_awaited_twice():
    ops = Ops()
    recorder = CallbackRecorder()

    task = ops.succeed(1, callback=recorder)
    assert await task == 1
    assert await task == 1
    await asyncio.sleep(0)

    assert len(recorder.calls) == 1


@pytest.mark.asyncio
async def test_cancellation_reported_to_callback():
    ops = Ops()
    recorder = CallbackRecorder()

    task = ops.hang(callback=recorder)
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await recorder.done.wait()

    error, result = recorder.calls[0]
    assert isinstance(error, asyncio.CancelledError)
    assert result is None


@pytest.mark.asyncio
async def test_callback_exception_is_logged(caplog):
    ops = Ops()

    def broken(error, result):
        raise RuntimeError("callback bug")

    with caplog.at_level(logging.ERROR, logger="token_session.modules.completion.completion"):
        assert await ops.succeed(1, callback=broken) == 1
        await asyncio.sleep(0)

    assert "callback raised" in caplog.text


@pytest.mark.asyncio
async def test_async_callback_is_scheduled():
    ops = Ops()
    seen = asyncio.Event()
    calls = []

    async def callback(error, result):
        calls.append((error, result))
        seen.set()

    await ops.succeed("v", callback=callback)
    await asyncio.wait_for(seen.wait(), timeout=1)

    assert calls == [(None, "v")]


@pytest.mark.asyncio
async def test_non_callable_callback_rejected():
    ops = Ops()
    with pytest.raises(TypeError):
        ops.succeed(1, callback="nope")
    assert ops.runs == 0


def test_requires_running_loop():
    ops = Ops()
    with pytest.raises(RuntimeError):
        ops.succeed(1)


@pytest.mark.asyncio
async def test_attach_callback_to_plain_future():
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    recorder = CallbackRecorder()

    attach_callback(future, recorder)
    future.set_result("done")
    await recorder.done.wait()

    assert recorder.calls == [(None, "done")]
