# infra/config/api_config.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from infra.exchange.binance_rest import MAINNET_URL, TESTNET_URL


class BinanceApiConfig(BaseModel):
    """
    Where and how the REST transport talks to Binance.

    YAML example:

      api:
        testnet: false
        recv_window_ms: 5000
        timeout_sec: 10
    """

    testnet: bool = Field(False, description="Use the Spot Testnet REST endpoint.")

    # Optional override. If not provided, we pick defaults for prod/testnet.
    base_url: Optional[str] = Field(
        default=None,
        description="Optional REST base url override (rarely needed).",
    )

    recv_window_ms: int = Field(
        5000,
        ge=1,
        le=60000,
        description="recvWindow sent with signed requests (Binance caps it at 60000).",
    )
    timeout_sec: float = Field(10.0, gt=0.0, description="HTTP timeout per request.")
    sync_time_on_start: bool = Field(
        True,
        description="Measure the server clock offset before the first signed call.",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, v):
        if v is None:
            return v
        v = v.strip().rstrip("/")
        return v or None

    def resolved_base_url(self) -> str:
        if self.base_url:
            return self.base_url
        return TESTNET_URL if self.testnet else MAINNET_URL
