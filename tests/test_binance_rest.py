# tests/test_binance_rest.py
from __future__ import annotations

import hashlib
import hmac
from urllib.parse import parse_qsl

import pytest
import requests
from binance.exceptions import BinanceAPIException

from infra.exchange.binance_rest import BinanceRestTransport
from infra.exchange.context import CallContext
from infra.exchange.errors import (
    ApiError,
    DeadlineExceeded,
    DecodeError,
    RequestCancelled,
    TransportError,
)
from infra.exchange.request import HttpMethod, RequestBuilder, SecurityType

FIXED_NOW = 1_700_000_000.0


@pytest.fixture
def frozen_time(monkeypatch):
    monkeypatch.setattr("infra.exchange.binance_rest.time.time", lambda: FIXED_NOW)


def _transport(session, **kw) -> BinanceRestTransport:
    return BinanceRestTransport(
        "key-123",
        "secret-456",
        base_url="https://api.example.test/",
        session=session,
        **kw,
    )


def _split_signature(payload: str):
    query, sig = payload.rsplit("&signature=", 1)
    return query, sig


def test_signed_get_puts_signed_query_in_url(make_session, make_response, frozen_time):
    session = make_session(make_response(200, b"{}"))
    t = _transport(session, recv_window_ms=6000)
    req = (
        RequestBuilder(HttpMethod.GET, "/sapi/v1/asset/assetDetail", SecurityType.SIGNED)
        .set_param("asset", "BTC")
        .build()
    )

    assert t.call_api(req) == b"{}"

    call = session.calls[0]
    assert call["method"] == "GET"
    assert "data" not in call
    assert call["headers"]["X-MBX-APIKEY"] == "key-123"

    base, payload = call["url"].split("?", 1)
    assert base == "https://api.example.test/sapi/v1/asset/assetDetail"

    query, sig = _split_signature(payload)
    assert parse_qsl(query) == [
        ("asset", "BTC"),
        ("timestamp", str(int(FIXED_NOW * 1000))),
        ("recvWindow", "6000"),
    ]
    expected = hmac.new(b"secret-456", query.encode(), hashlib.sha256).hexdigest()
    assert sig == expected


def test_signed_post_sends_form_body(make_session, make_response, frozen_time):
    session = make_session(make_response(200, b'{"tranId":1,"status":"S"}'))
    t = _transport(session)
    req = (
        RequestBuilder(HttpMethod.POST, "/sapi/v3/asset/getUserAsset", SecurityType.SIGNED)
        .set_param("needBtcValuation", True)
        .build()
    )

    t.call_api(req)

    call = session.calls[0]
    assert call["url"] == "https://api.example.test/sapi/v3/asset/getUserAsset"
    assert call["headers"]["Content-Type"] == "application/x-www-form-urlencoded"
    query, _ = _split_signature(call["data"])
    assert query.startswith("needBtcValuation=true&timestamp=")


def test_unsigned_request_has_no_key_or_signature(make_session, make_response):
    session = make_session(make_response(200, b"{}"))
    t = _transport(session)
    t.call_api(RequestBuilder(HttpMethod.GET, "/api/v3/ping").build())

    call = session.calls[0]
    assert call["url"] == "https://api.example.test/api/v3/ping"
    assert "X-MBX-APIKEY" not in call["headers"]


def test_time_offset_is_applied_to_timestamp(make_session, make_response, frozen_time):
    session = make_session(make_response(200, b"{}"))
    t = _transport(session)
    t.time_offset_ms = -1500
    t.call_api(RequestBuilder(HttpMethod.GET, "/x", SecurityType.SIGNED).build())

    query, _ = _split_signature(session.calls[0]["url"].split("?", 1)[1])
    assert dict(parse_qsl(query))["timestamp"] == str(int(FIXED_NOW * 1000) - 1500)


def test_sync_time_measures_offset(make_session, make_response, frozen_time):
    server_ms = int(FIXED_NOW * 1000) + 2000
    session = make_session(make_response(200, f'{{"serverTime": {server_ms}}}'.encode()))
    t = _transport(session)

    assert t.sync_time() == 2000
    assert t.time_offset_ms == 2000
    assert session.calls[0]["url"].endswith("/api/v3/time")


def test_sync_time_bad_body_is_decode_error(make_session, make_response):
    t = _transport(make_session(make_response(200, b"[]")))
    with pytest.raises(DecodeError):
        t.sync_time()


def test_http_error_becomes_api_error(make_session, make_response):
    body = b'{"code":-1022,"msg":"Signature for this request is not valid."}'
    t = _transport(make_session(make_response(400, body)))

    with pytest.raises(ApiError) as ei:
        t.call_api(RequestBuilder(HttpMethod.GET, "/x", SecurityType.SIGNED).build())

    err = ei.value
    assert isinstance(err, TransportError)
    assert isinstance(err, BinanceAPIException)
    assert err.code == -1022
    assert err.status_code == 400
    assert "Signature" in err.message


def test_network_failure_becomes_transport_error(make_session):
    boom = requests.exceptions.ConnectionError("refused")
    t = _transport(make_session(error=boom))

    with pytest.raises(TransportError) as ei:
        t.call_api(RequestBuilder(HttpMethod.GET, "/x").build())
    assert ei.value.__cause__ is boom


def test_timeout_within_deadline_is_deadline_exceeded(make_session):
    session = make_session(error=requests.exceptions.ReadTimeout("slow"))
    t = _transport(session, timeout_sec=30.0)

    with pytest.raises(DeadlineExceeded):
        t.call_api(RequestBuilder(HttpMethod.GET, "/x").build(), CallContext(timeout=0.5))
    assert session.calls[0]["timeout"] <= 0.5


def test_plain_timeout_is_transport_error(make_session):
    t = _transport(make_session(error=requests.exceptions.ReadTimeout("slow")), timeout_sec=3.0)

    with pytest.raises(TransportError) as ei:
        t.call_api(RequestBuilder(HttpMethod.GET, "/x").build())
    assert not isinstance(ei.value, DeadlineExceeded)


def test_cancelled_context_never_sends(make_session):
    session = make_session()
    t = _transport(session)
    ctx = CallContext()
    ctx.cancel()

    with pytest.raises(RequestCancelled):
        t.call_api(RequestBuilder(HttpMethod.GET, "/x").build(), ctx)
    assert session.calls == []


def test_signed_request_without_secret_fails_locally(make_session):
    session = make_session()
    t = BinanceRestTransport("key", "", session=session)

    with pytest.raises(TransportError):
        t.call_api(RequestBuilder(HttpMethod.GET, "/x", SecurityType.SIGNED).build())
    assert session.calls == []


def test_close_closes_session(make_session):
    session = make_session()
    _transport(session).close()
    assert session.closed


def test_timeout_is_logged_at_warning(make_session, caplog):
    t = _transport(make_session(error=requests.exceptions.ConnectTimeout("slow")), timeout_sec=3.0)

    with caplog.at_level("WARNING", logger="asset.transport"):
        with pytest.raises(TransportError):
            t.call_api(RequestBuilder(HttpMethod.GET, "/sapi/v1/asset/assetDetail").build())

    assert any(
        r.levelname == "WARNING" and "/sapi/v1/asset/assetDetail" in r.getMessage() and "timed out" in r.getMessage()
        for r in caplog.records
    )
