# infra/exchange/base.py
from __future__ import annotations

from typing import Optional, Protocol

from infra.exchange.context import CallContext
from infra.exchange.request import Request


class Transport(Protocol):
    """
    Sends one Request and returns the raw response body.

    Raises TransportError (or a subclass) on network/HTTP failure.
    Signing is the transport's job, driven by Request.sec_type.
    """

    def call_api(self, request: Request, ctx: Optional[CallContext] = None) -> bytes: ...
