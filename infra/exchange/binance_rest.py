# infra/exchange/binance_rest.py
from __future__ import annotations

import hashlib
import hmac
import json
import time
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import requests

from infra.exchange.context import CallContext
from infra.exchange.errors import ApiError, DeadlineExceeded, DecodeError, TransportError
from infra.exchange.request import HttpMethod, Request, RequestBuilder
from infra.logging_setup import get_logger

MAINNET_URL = "https://api.binance.com"
TESTNET_URL = "https://testnet.binance.vision"


class BinanceRestTransport:
    """
    Binance REST transport for the asset endpoints.

      - API_KEY/SIGNED requests carry the X-MBX-APIKEY header
      - SIGNED requests get timestamp + recvWindow + HMAC-SHA256 signature
      - GET/DELETE send params in the query string, POST/PUT as form body

    No retries: a failure is raised once and the caller decides.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        *,
        base_url: str = MAINNET_URL,
        recv_window_ms: int = 5000,
        timeout_sec: float = 10.0,
        session: Optional[requests.Session] = None,
        logger_name: str = "asset.transport",
    ) -> None:
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.recv_window_ms = recv_window_ms
        self.timeout_sec = timeout_sec
        self.session = session or requests.Session()
        self.logger = get_logger(logger_name)

        # server time minus local time, in ms (see sync_time)
        self.time_offset_ms = 0

    # -------------------------
    # Signing
    # -------------------------
    def _timestamp_ms(self) -> int:
        return int(time.time() * 1000) + self.time_offset_ms

    def _sign(self, query: str) -> str:
        return hmac.new(
            self.api_secret.encode("utf-8"),
            query.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    def encode_params(self, request: Request) -> str:
        """
        Url-encoded param string, signed when the request requires it.
        """
        items: List[Tuple[str, str]] = request.query_items()
        if request.needs_signature:
            if not self.api_secret:
                raise TransportError(f"{request.endpoint} requires a signature but no api_secret is configured")
            items.append(("timestamp", str(self._timestamp_ms())))
            items.append(("recvWindow", str(self.recv_window_ms)))
            query = urlencode(items)
            return f"{query}&signature={self._sign(query)}"
        return urlencode(items)

    def _headers(self, request: Request) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if request.needs_api_key:
            if not self.api_key:
                raise TransportError(f"{request.endpoint} requires an API key but none is configured")
            headers["X-MBX-APIKEY"] = self.api_key
        if request.method in (HttpMethod.POST, HttpMethod.PUT):
            headers["Content-Type"] = "application/x-www-form-urlencoded"
        return headers

    def _http_timeout(self, ctx: CallContext) -> float:
        rem = ctx.remaining()
        if rem is None:
            return self.timeout_sec
        return min(self.timeout_sec, rem)

    # -------------------------
    # Transport contract
    # -------------------------
    def call_api(self, request: Request, ctx: Optional[CallContext] = None) -> bytes:
        ctx = ctx or CallContext.background()
        ctx.check()

        payload = self.encode_params(request)
        headers = self._headers(request)
        url = self.base_url + request.endpoint

        http_timeout = self._http_timeout(ctx)
        kwargs: Dict[str, Any] = dict(headers=headers, timeout=http_timeout)
        if request.method in (HttpMethod.POST, HttpMethod.PUT):
            kwargs["data"] = payload
        elif payload:
            url = f"{url}?{payload}"

        self.logger.debug(
            "%s %s params=%s",
            request.method.value,
            request.endpoint,
            request.param_names(),
        )

        try:
            resp = self.session.request(request.method.value, url, **kwargs)
        except requests.exceptions.Timeout as e:
            self.logger.warning("%s %s timed out after %ss", request.method.value, request.endpoint, http_timeout)
            # timeout was bounded by the caller's deadline
            if http_timeout < self.timeout_sec:
                raise DeadlineExceeded(f"{request.method.value} {request.endpoint}: deadline exceeded") from e
            raise TransportError(f"{request.method.value} {request.endpoint}: timeout") from e
        except requests.exceptions.RequestException as e:
            self.logger.warning("%s %s failed: %s", request.method.value, request.endpoint, e)
            raise TransportError(f"{request.method.value} {request.endpoint}: {e}") from e

        ctx.check()

        if resp.status_code >= 400:
            err = ApiError(resp, resp.status_code, resp.text)
            self.logger.warning(
                "%s %s -> HTTP %s code=%s msg=%s",
                request.method.value,
                request.endpoint,
                resp.status_code,
                err.code,
                err.message,
            )
            raise err

        return resp.content

    # -------------------------
    # Helpers
    # -------------------------
    def sync_time(self, ctx: Optional[CallContext] = None) -> int:
        """
        Align signed timestamps with Binance server time.
        Returns the measured offset in ms.
        """
        req = RequestBuilder(HttpMethod.GET, "/api/v3/time").build()
        local_before = int(time.time() * 1000)
        data = self.call_api(req, ctx)
        local_after = int(time.time() * 1000)

        try:
            server_time = int(json.loads(data)["serverTime"])
        except (ValueError, KeyError, TypeError) as e:
            raise DecodeError(f"Unexpected server time response: {data!r}", body=data) from e

        self.time_offset_ms = server_time - (local_before + local_after) // 2
        self.logger.info("Binance server time offset: %s ms", self.time_offset_ms)
        return self.time_offset_ms

    def close(self) -> None:
        self.session.close()
