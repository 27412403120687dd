# api/tests/test_poller.py
from __future__ import annotations

import asyncio

import httpx

from conftest import fail, ok


def test_poll_skipped_without_session(console, backend):
    assert asyncio.run(console.poller.poll_once()) is None
    assert backend.requests == []


def test_poll_records_count(console, backend, logged_in):
    backend.on("GET", "/notifications/unread-count", ok({"count": 1}), ok({"count": 4}))

    assert asyncio.run(console.poller.poll_once()) == 1
    assert asyncio.run(console.poller.poll_once()) == 4

    state = console.poller.state()
    assert state["lastCount"] == 4
    assert state["lastPolledAt"] is not None
    assert state["lastError"] is None


def test_poll_error_is_kept_in_state(console, backend, logged_in):
    backend.on("GET", "/notifications/unread-count", fail(400, "Yêu cầu không hợp lệ"))

    assert asyncio.run(console.poller.poll_once()) is None
    assert console.poller.state()["lastError"] == "Yêu cầu không hợp lệ"
    assert console.poller.last_count is None


def test_start_and_stop(console, backend, logged_in):
    backend.on("GET", "/notifications/unread-count", ok({"count": 2}))

    async def run():
        console.poller.start()
        assert console.poller.running
        await asyncio.sleep(0.05)
        await console.poller.stop()

    asyncio.run(run())
    assert not console.poller.running
    assert console.poller.last_count == 2


def test_loop_survives_unexpected_errors(console, backend, logged_in):
    def broken(request):
        raise httpx.DecodingError("bad gzip", request=request)

    backend.on("GET", "/notifications/unread-count", broken, ok({"count": 3}))

    async def run():
        console.poller.start()
        await asyncio.sleep(0.1)
        assert console.poller.running
        await console.poller.stop()

    asyncio.run(run())
    assert console.poller.last_count == 3
    assert console.poller.last_error is None


def test_crash_is_recorded(console, backend, logged_in):
    def broken(request):
        raise httpx.TooManyRedirects("redirect loop", request=request)

    backend.on("GET", "/notifications/unread-count", broken)

    assert asyncio.run(console.poller.poll_once()) is None
    assert console.poller.state()["lastError"] == "redirect loop"


def test_non_numeric_count_reads_as_zero(console, backend, logged_in):
    backend.on("GET", "/notifications/unread-count", ok({"count": "n/a"}))
    assert asyncio.run(console.poller.poll_once()) == 0
