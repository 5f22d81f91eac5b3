# tests/test_context.py
from __future__ import annotations

import threading
import time

import pytest

from infra.exchange.context import CallContext
from infra.exchange.errors import DeadlineExceeded, RequestCancelled


def test_background_context_never_expires():
    ctx = CallContext.background()
    assert ctx.remaining() is None
    ctx.check()


def test_deadline_expires():
    ctx = CallContext(timeout=0.01)
    time.sleep(0.02)
    assert ctx.remaining() == 0.0
    with pytest.raises(DeadlineExceeded):
        ctx.check()


def test_shared_event_cancels():
    ev = threading.Event()
    ctx = CallContext(timeout=60, cancel_event=ev)
    ctx.check()

    ev.set()
    assert ctx.cancelled
    with pytest.raises(RequestCancelled):
        ctx.check()


@pytest.mark.parametrize("bad", [0, -1.0])
def test_non_positive_timeout_rejected(bad):
    with pytest.raises(ValueError):
        CallContext(timeout=bad)
