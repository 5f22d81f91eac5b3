# infra/secrets.py
from __future__ import annotations

import os
from typing import Optional, Tuple


class EnvSecretsProvider:
    """
    Read secrets from environment variables.

    Expected env vars:
      Testnet:
        BINANCE_TESTNET_API_KEY
        BINANCE_TESTNET_API_SECRET

      Mainnet:
        BINANCE_API_KEY
        BINANCE_API_SECRET
    """

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return os.environ.get(name, default)

    def require(self, name: str) -> str:
        v = os.environ.get(name)
        if not v:
            raise RuntimeError(f"Missing required environment variable: {name}")
        return v

    def get_binance_keys(self, testnet: bool) -> Tuple[str, str]:
        """
        Returns (api_key, api_secret) for testnet or mainnet.
        """
        if testnet:
            return self.require("BINANCE_TESTNET_API_KEY"), self.require("BINANCE_TESTNET_API_SECRET")
        return self.require("BINANCE_API_KEY"), self.require("BINANCE_API_SECRET")
