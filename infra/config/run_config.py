# infra/config/run_config.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .api_config import BinanceApiConfig
from .logging_config import LoggingConfig


class ClientRunConfig(BaseModel):
    """
    Top-level configuration for the asset client.
    One YAML/JSON file → one ClientRunConfig.
    """

    name: str = Field("default", description="Human-readable profile name.")
    description: Optional[str] = Field(None, description="Optional free-text description.")

    api: BinanceApiConfig = Field(default_factory=BinanceApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
