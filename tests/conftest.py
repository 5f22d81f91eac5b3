# tests/conftest.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from infra.exchange.context import CallContext
from infra.exchange.request import Request


class FakeTransport:
    """
    Records every Request and replies with a canned body (or raises).
    """

    def __init__(self, body: bytes = b"{}", error: Optional[Exception] = None):
        self.body = body
        self.error = error
        self.calls: List[Tuple[Request, Optional[CallContext]]] = []

    @property
    def last_request(self) -> Request:
        assert self.calls, "transport was never called"
        return self.calls[-1][0]

    def call_api(self, request: Request, ctx: Optional[CallContext] = None) -> bytes:
        self.calls.append((request, ctx))
        if self.error is not None:
            raise self.error
        return self.body


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"{}"):
        self.status_code = status_code
        self.content = content
        self.text = content.decode("utf-8")
        self.request = None


class FakeSession:
    """
    Minimal stand-in for requests.Session.request().
    """

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(dict(method=method, url=url, **kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_response():
    return FakeResponse
