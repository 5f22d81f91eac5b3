# infra/exchange/context.py
from __future__ import annotations

import threading
import time
from typing import Optional

from infra.exchange.errors import DeadlineExceeded, RequestCancelled


class CallContext:
    """
    Cancellation + deadline carried through a single `do()` call.

    - timeout: seconds from construction until the call must give up
    - cancel(): cooperative; the transport checks it before sending
      and after the response arrives
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be > 0 (got {timeout})")
        self.timeout = timeout
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancel = cancel_event or threading.Event()

    @classmethod
    def background(cls) -> "CallContext":
        return cls()

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        if self._cancel.is_set():
            raise RequestCancelled("request cancelled by caller")
        rem = self.remaining()
        if rem is not None and rem <= 0.0:
            raise DeadlineExceeded(f"deadline of {self.timeout}s exceeded")
