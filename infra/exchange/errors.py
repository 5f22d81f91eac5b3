# infra/exchange/errors.py
from __future__ import annotations

from typing import Any, Optional

from binance.exceptions import BinanceAPIException


class AssetClientError(Exception):
    """
    Base class for every error raised by the asset client.
    """


class TransportError(AssetClientError):
    """
    Network, signing or HTTP-level failure. Raised by the transport and
    propagated unchanged through the services.
    """


class RequestCancelled(TransportError):
    pass


class DeadlineExceeded(TransportError):
    pass


class ApiError(TransportError, BinanceAPIException):
    """
    Binance answered with an error status (4xx/5xx).

    Also a python-binance BinanceAPIException, so callers already catching
    that type keep working. Exposes `code`, `message`, `status_code`.
    """

    def __init__(self, response: Any, status_code: int, text: str) -> None:
        BinanceAPIException.__init__(self, response, status_code, text)

    def __str__(self) -> str:
        return f"APIError(code={self.code}, status={self.status_code}): {self.message}"


class DecodeError(AssetClientError):
    """
    Response body was not valid JSON or did not match the expected shape.
    """

    def __init__(self, message: str, body: Optional[bytes] = None) -> None:
        super().__init__(message)
        self.body = body
