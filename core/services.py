# core/services.py
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from core.models import (
    AssetDetail,
    CoinInfo,
    ConvertTransferResponse,
    UserAssetRecord,
    parse_asset_details,
    parse_coin_infos,
    parse_convert_transfer,
    parse_user_assets,
)
from infra.exchange.base import Transport
from infra.exchange.context import CallContext
from infra.exchange.errors import AssetClientError
from infra.exchange.request import HttpMethod, Request, RequestBuilder, SecurityType

ASSET_DETAIL_ENDPOINT = "/sapi/v1/asset/assetDetail"
ALL_COINS_INFO_ENDPOINT = "/sapi/v1/capital/config/getall"
USER_ASSET_ENDPOINT = "/sapi/v3/asset/getUserAsset"
CONVERT_TRANSFER_ENDPOINT = "/sapi/v1/asset/convert"


class _Service:
    """
    Shared plumbing: hold the transport, build the Request, send it.

    Subclasses implement `build_request()` and `do()`.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def build_request(self) -> Request:
        raise NotImplementedError

    def _call(self, ctx: Optional[CallContext]) -> bytes:
        return self._transport.call_api(self.build_request(), ctx)


class GetAssetDetailService(_Service):
    """
    Deposit/withdraw policy per asset.
    Docs: https://binance-docs.github.io/apidocs/spot/en/#asset-detail-user_data
    """

    def __init__(self, transport: Transport) -> None:
        super().__init__(transport)
        self._asset: Optional[str] = None

    def asset(self, asset: str) -> "GetAssetDetailService":
        self._asset = asset
        return self

    def build_request(self) -> Request:
        r = RequestBuilder(HttpMethod.GET, ASSET_DETAIL_ENDPOINT, SecurityType.SIGNED)
        if self._asset is not None:
            r.set_param("asset", self._asset)
        return r.build()

    def do(self, ctx: Optional[CallContext] = None) -> Dict[str, AssetDetail]:
        return parse_asset_details(self._call(ctx))


class GetAllCoinsInfoService(_Service):
    """
    Coin balances plus per-network deposit/withdraw configuration.

    The endpoint takes no asset filter: `asset()` is applied to the decoded
    list, never sent.
    """

    def __init__(self, transport: Transport) -> None:
        super().__init__(transport)
        self._asset: Optional[str] = None

    def asset(self, asset: str) -> "GetAllCoinsInfoService":
        self._asset = asset
        return self

    def build_request(self) -> Request:
        return RequestBuilder(HttpMethod.GET, ALL_COINS_INFO_ENDPOINT, SecurityType.SIGNED).build()

    def do(self, ctx: Optional[CallContext] = None) -> List[CoinInfo]:
        """
        On failure the raised AssetClientError carries `result == []`.
        """
        try:
            coins = parse_coin_infos(self._call(ctx))
        except AssetClientError as e:
            e.result = []
            raise
        if self._asset is not None:
            coins = [c for c in coins if c.coin == self._asset]
        return coins

    def do_safe(self, ctx: Optional[CallContext] = None) -> Tuple[List[CoinInfo], Optional[AssetClientError]]:
        try:
            return self.do(ctx), None
        except AssetClientError as e:
            return [], e


class GetUserAssetService(_Service):
    """
    Docs: https://binance-docs.github.io/apidocs/spot/en/#user-asset-user_data
    """

    def __init__(self, transport: Transport) -> None:
        super().__init__(transport)
        self._asset: Optional[str] = None
        self._need_btc_valuation = False

    def asset(self, asset: str) -> "GetUserAssetService":
        self._asset = asset
        return self

    def need_btc_valuation(self, val: bool) -> "GetUserAssetService":
        self._need_btc_valuation = val
        return self

    def build_request(self) -> Request:
        r = RequestBuilder(HttpMethod.POST, USER_ASSET_ENDPOINT, SecurityType.SIGNED)
        if self._asset is not None:
            r.set_param("asset", self._asset)
        # false is the server default and is never sent
        if self._need_btc_valuation:
            r.set_param("needBtcValuation", True)
        return r.build()

    def do(self, ctx: Optional[CallContext] = None) -> List[UserAssetRecord]:
        return parse_user_assets(self._call(ctx))


class ConvertTransferService(_Service):
    """
    Convert between BUSD and a stablecoin.
    Docs: https://binance-docs.github.io/apidocs/spot/en/#busd-convert-trade

    Not idempotent on its own: reuse the same client_tran_id when re-sending
    a logical transfer so the backend can deduplicate it.
    """

    def __init__(
        self,
        transport: Transport,
        client_tran_id: str,
        asset: str,
        amount: int,
        target_asset: str,
        account_type: Optional[str] = None,
    ) -> None:
        super().__init__(transport)
        self._client_tran_id = client_tran_id
        self._asset = asset
        self._amount = amount
        self._target_asset = target_asset
        self._account_type = account_type

    def client_tran_id(self, client_tran_id: str) -> "ConvertTransferService":
        self._client_tran_id = client_tran_id
        return self

    def asset(self, asset: str) -> "ConvertTransferService":
        self._asset = asset
        return self

    def amount(self, amount: int) -> "ConvertTransferService":
        self._amount = amount
        return self

    def target_asset(self, target_asset: str) -> "ConvertTransferService":
        self._target_asset = target_asset
        return self

    def account_type(self, account_type: str) -> "ConvertTransferService":
        self._account_type = account_type
        return self

    def build_request(self) -> Request:
        r = RequestBuilder(HttpMethod.POST, CONVERT_TRANSFER_ENDPOINT, SecurityType.SIGNED)
        r.set_param("clientTranId", self._client_tran_id)
        r.set_param("asset", self._asset)
        r.set_param("amount", self._amount)
        r.set_param("targetAsset", self._target_asset)
        if self._account_type is not None:
            r.set_param("accountType", self._account_type)
        return r.build()

    def do(self, ctx: Optional[CallContext] = None) -> ConvertTransferResponse:
        return parse_convert_transfer(self._call(ctx))
