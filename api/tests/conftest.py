# api/tests/conftest.py
from __future__ import annotations

import json
import os
import tempfile
from typing import Any, Callable, Dict, List, Tuple, Union

# settings are read at import time
os.environ.setdefault("CONSOLE_DATA_ROOT", tempfile.mkdtemp(prefix="erp-console-"))
os.environ["NOTIFICATION_POLLING"] = "false"
os.environ["ERP_API_URL"] = "http://erp.test/api"

import httpx
import pytest
from fastapi.testclient import TestClient

from erp_console.cache import QueryCache
from erp_console.client import ErpClient
from erp_console.deps import Console
from erp_console.poller import NotificationPoller
from erp_console.session import SessionStore

BASE_URL = "http://erp.test/api"

Reply = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


def ok(data: Any = None, **extra: Any) -> Tuple[int, Dict[str, Any]]:
    return 200, {"success": True, "data": data, **extra}


def fail(status: int, message: str, code: str = "ERROR") -> Tuple[int, Dict[str, Any]]:
    return status, {"success": False, "error": {"code": code, "message": message}}


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Backend:
    """
    Scripted ERP backend for httpx.MockTransport.

    on("GET", "/products", ok([...])) registers replies per (method, path);
    several replies are served in order and the last one repeats.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, *replies: Reply) -> "Backend":
        self.routes[(method.upper(), path)] = list(replies)
        return self

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and _path(r) == path]

    def count(self, method: str, path: str) -> int:
        return len(self.calls(method, path))

    def last(self, method: str, path: str) -> httpx.Request:
        return self.calls(method, path)[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        replies = self.routes.get((request.method, _path(request)))
        if not replies:
            status, body = fail(404, "Không tìm thấy", "NOT_FOUND")
            return httpx.Response(status, json=body)
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if callable(reply):
            return reply(request)
        status, body = reply
        return httpx.Response(status, json=body)


def _path(request: httpx.Request) -> str:
    path = request.url.path
    return path[len("/api"):] if path.startswith("/api") else path


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(tmp_path) -> SessionStore:
    return SessionStore(tmp_path)


@pytest.fixture
def logged_in(session) -> SessionStore:
    session.save(
        {"accessToken": "access-1", "refreshToken": "refresh-1"},
        user={"id": 1, "email": "admin@example.com", "fullName": "Admin", "role": {"roleKey": "admin"}},
    )
    return session


@pytest.fixture
def client(backend, session):
    c = ErpClient(BASE_URL, session, transport=httpx.MockTransport(backend))
    yield c
    c.close()


@pytest.fixture
def cache(clock) -> QueryCache:
    return QueryCache(stale_time=300, gc_time=600, clock=clock)


@pytest.fixture
def console(tmp_path, session, client, cache) -> Console:
    c = Console(data_root=tmp_path, session=session, client=client, cache=cache)
    c.poller = NotificationPoller(c.notifications, session, interval=0.01)
    return c


@pytest.fixture
def api(console):
    from erp_console.main import app

    app.state.console = console
    with TestClient(app) as tc:
        yield tc
    del app.state.console
