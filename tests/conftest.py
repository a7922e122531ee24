"""Shared fakes for the HTTP layer."""

from __future__ import annotations

import base64
import json
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest

from buzzex.transport.http import HTTPTransport


TEST_SECRET = base64.b64encode(b"buzzex-test-secret").decode()


class FakeResponse:
    def __init__(self, status: int = 200, body: Any = None):
        self.status = status
        self._body = body if isinstance(body, str) else json.dumps(body if body is not None else {})

    async def text(self) -> str:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; replies from a queue"""

    def __init__(self, responses: Optional[List[FakeResponse]] = None, error: Optional[BaseException] = None):
        self.closed = False
        self.calls: List[SimpleNamespace] = []
        self._responses = list(responses or [])
        self.error = error

    def request(self, method, url, **kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        if self.error is not None:
            raise self.error
        return self._responses.pop(0)

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def transport(fake_session):
    return HTTPTransport(session=fake_session)
