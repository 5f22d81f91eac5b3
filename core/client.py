# core/client.py
from __future__ import annotations

from typing import Optional

from core.services import (
    ConvertTransferService,
    GetAllCoinsInfoService,
    GetAssetDetailService,
    GetUserAssetService,
)
from infra.config.api_config import BinanceApiConfig
from infra.exchange.base import Transport
from infra.exchange.binance_rest import BinanceRestTransport
from infra.exchange.context import CallContext
from infra.logging_setup import get_logger
from infra.secrets import EnvSecretsProvider


class AssetClient:
    """
    Entry point for the asset endpoints.

    Hands the same transport to every service it creates; services hold no
    other shared state, so separate services can run on separate threads.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        cfg: BinanceApiConfig,
        secrets: Optional[EnvSecretsProvider] = None,
        logger_name: str = "asset.client",
        ctx: Optional[CallContext] = None,
    ) -> "AssetClient":
        secrets = secrets or EnvSecretsProvider()
        api_key, api_secret = secrets.get_binance_keys(cfg.testnet)

        transport = BinanceRestTransport(
            api_key,
            api_secret,
            base_url=cfg.resolved_base_url(),
            recv_window_ms=cfg.recv_window_ms,
            timeout_sec=cfg.timeout_sec,
        )
        get_logger(logger_name).info(
            "AssetClient ready (testnet=%s, base_url=%s)",
            cfg.testnet,
            transport.base_url,
        )
        if cfg.sync_time_on_start:
            transport.sync_time(ctx)
        return cls(transport)

    def new_get_asset_detail_service(self) -> GetAssetDetailService:
        return GetAssetDetailService(self.transport)

    def new_get_all_coins_info_service(self) -> GetAllCoinsInfoService:
        return GetAllCoinsInfoService(self.transport)

    def new_get_user_asset_service(self) -> GetUserAssetService:
        return GetUserAssetService(self.transport)

    def new_convert_transfer_service(
        self,
        client_tran_id: str,
        asset: str,
        amount: int,
        target_asset: str,
        account_type: Optional[str] = None,
    ) -> ConvertTransferService:
        return ConvertTransferService(
            self.transport,
            client_tran_id=client_tran_id,
            asset=asset,
            amount=amount,
            target_asset=target_asset,
            account_type=account_type,
        )
