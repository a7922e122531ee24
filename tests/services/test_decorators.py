"""Tests for call logging and the callback adapter"""

from __future__ import annotations

import asyncio
import logging

import pytest

from buzzex.core.exceptions import TransportError
from buzzex.services.decorators import log_api_call, with_callback


class _Api:
    @log_api_call
    async def call(self, method, value):
        return value

    @log_api_call
    async def fail(self, method):
        raise ValueError("boom")

    @log_api_call
    async def fail_typed(self, method):
        raise TransportError("HTTP 502", details={"status": 502})


@pytest.mark.asyncio
async def test_log_api_call_returns_result(caplog):
    with caplog.at_level(logging.DEBUG, logger="buzzex.services.decorators"):
        result = await _Api().call("ticker", 5)

    assert result == 5
    assert "call(ticker) completed" in caplog.text


@pytest.mark.asyncio
async def test_log_api_call_reraises(caplog):
    with caplog.at_level(logging.ERROR, logger="buzzex.services.decorators"):
        with pytest.raises(ValueError, match="boom"):
            await _Api().fail("getinfo")

    assert "fail(getinfo) failed" in caplog.text


@pytest.mark.asyncio
async def test_log_api_call_keeps_typed_errors_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="buzzex.services.decorators"):
        with pytest.raises(TransportError):
            await _Api().fail_typed("getinfo")

    records = [r for r in caplog.records if r.name == "buzzex.services.decorators"]
    assert [r.levelno for r in records] == [logging.DEBUG]
    assert "fail_typed(getinfo) failed" in records[0].getMessage()
    assert "TransportError" in records[0].getMessage()


@pytest.mark.asyncio
async def test_with_callback_without_callback_returns_coroutine():
    async def work():
        return 1

    pending = with_callback(work())

    assert asyncio.iscoroutine(pending)
    assert await pending == 1


@pytest.mark.asyncio
async def test_with_callback_schedules_task():
    calls = []

    async def work():
        return "ok"

    task = with_callback(work(), lambda err, res: calls.append((err, res)))

    assert isinstance(task, asyncio.Task)
    assert await task == "ok"
    await asyncio.sleep(0)
    assert calls == [(None, "ok")]


@pytest.mark.asyncio
async def test_with_callback_forwards_error():
    calls = []

    async def work():
        raise RuntimeError("failed")

    task = with_callback(work(), lambda err, res: calls.append((err, res)))
    with pytest.raises(RuntimeError):
        await task
    await asyncio.sleep(0)

    assert isinstance(calls[0][0], RuntimeError)
    assert calls[0][1] is None


@pytest.mark.asyncio
async def test_with_callback_reports_cancellation():
    calls = []
    started = asyncio.Event()

    async def work():
        started.set()
        await asyncio.sleep(10)

    task = with_callback(work(), lambda err, res: calls.append((err, res)))
    await started.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await asyncio.sleep(0)

    assert isinstance(calls[0][0], asyncio.CancelledError)


def test_with_callback_needs_running_loop():
    async def work():
        return 1

    with pytest.raises(RuntimeError):
        with_callback(work(), lambda err, res: None)
