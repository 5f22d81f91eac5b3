from __future__ import annotations

from .api_config import BinanceApiConfig
from .logging_config import LoggingConfig
from .run_config import ClientRunConfig

__all__ = [
    "BinanceApiConfig",
    "LoggingConfig",
    "ClientRunConfig",
]
