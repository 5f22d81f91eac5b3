# core/models.py
from __future__ import annotations

import json
from typing import Any, Dict, List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

from infra.exchange.errors import DecodeError


class WireModel(BaseModel):
    """
    Read-only response record.

    Python attributes are snake_case; JSON keys (aliases) are the exact names
    Binance sends. Missing or null keys fall back to the field default.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# /sapi/v1/asset/assetDetail
# ---------------------------------------------------------------------------

class AssetDetail(WireModel):
    min_withdraw_amount: StrictStr = Field("", alias="minWithdrawAmount")
    deposit_status: StrictBool = Field(False, alias="depositStatus")
    withdraw_fee: StrictStr = Field("", alias="withdrawFee")
    withdraw_status: StrictBool = Field(False, alias="withdrawStatus")
    deposit_tip: StrictStr = Field("", alias="depositTip")


# ---------------------------------------------------------------------------
# /sapi/v1/capital/config/getall
# ---------------------------------------------------------------------------

class Network(WireModel):
    address_regex: StrictStr = Field("", alias="addressRegex")
    coin: StrictStr = Field("", alias="coin")
    # only present while deposits are closed
    deposit_desc: StrictStr = Field("", alias="depositDesc")
    deposit_enable: StrictBool = Field(False, alias="depositEnable")
    is_default: StrictBool = Field(False, alias="isDefault")
    memo_regex: StrictStr = Field("", alias="memoRegex")
    min_confirm: StrictInt = Field(0, alias="minConfirm", description="Confirmations before crediting.")
    name: StrictStr = Field("", alias="name")
    network: StrictStr = Field("", alias="network")
    reset_address_status: StrictBool = Field(False, alias="resetAddressStatus")
    special_tips: StrictStr = Field("", alias="specialTips")
    un_lock_confirm: StrictInt = Field(0, alias="unLockConfirm", description="Confirmations before unlocking.")
    # only present while withdrawals are closed
    withdraw_desc: StrictStr = Field("", alias="withdrawDesc")
    withdraw_enable: StrictBool = Field(False, alias="withdrawEnable")
    withdraw_fee: StrictStr = Field("", alias="withdrawFee")
    withdraw_integer_multiple: StrictStr = Field("", alias="withdrawIntegerMultiple")
    withdraw_max: StrictStr = Field("", alias="withdrawMax")
    withdraw_min: StrictStr = Field("", alias="withdrawMin")
    same_address: StrictBool = Field(False, alias="sameAddress", description="True if a memo is required.")


class CoinInfo(WireModel):
    coin: StrictStr = Field("", alias="coin")
    deposit_all_enable: StrictBool = Field(False, alias="depositAllEnable")
    free: StrictStr = Field("", alias="free")
    freeze: StrictStr = Field("", alias="freeze")
    ipoable: StrictStr = Field("", alias="ipoable")
    ipoing: StrictStr = Field("", alias="ipoing")
    is_legal_money: StrictBool = Field(False, alias="isLegalMoney")
    locked: StrictStr = Field("", alias="locked")
    name: StrictStr = Field("", alias="name")
    network_list: List[Network] = Field(default_factory=list, alias="networkList")
    storage: StrictStr = Field("", alias="storage")
    trading: StrictBool = Field(False, alias="trading")
    withdraw_all_enable: StrictBool = Field(False, alias="withdrawAllEnable")
    withdrawing: StrictStr = Field("", alias="withdrawing")

    def default_network(self) -> Network | None:
        for n in self.network_list:
            if n.is_default:
                return n
        return None


# ---------------------------------------------------------------------------
# /sapi/v3/asset/getUserAsset
# ---------------------------------------------------------------------------

class UserAssetRecord(WireModel):
    asset: StrictStr = Field("", alias="asset")
    free: StrictStr = Field("", alias="free")
    locked: StrictStr = Field("", alias="locked")
    freeze: StrictStr = Field("", alias="freeze")
    withdrawing: StrictStr = Field("", alias="withdrawing")
    ipoable: StrictStr = Field("", alias="ipoable")
    btc_valuation: StrictStr = Field("", alias="btcValuation")


# ---------------------------------------------------------------------------
# /sapi/v1/asset/convert
# ---------------------------------------------------------------------------

class ConvertTransferResponse(WireModel):
    tran_id: StrictInt = Field(0, alias="tranId")
    status: StrictStr = Field("", alias="status")


# ---------------------------------------------------------------------------
# Decoding raw response bodies
# ---------------------------------------------------------------------------

def _load_json(data: bytes) -> Any:
    try:
        return json.loads(data)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"Response is not valid JSON: {e}", body=data) from e


def _expect(raw: Any, kind: type, what: str, data: bytes) -> None:
    if not isinstance(raw, kind):
        raise DecodeError(
            f"Expected a JSON {kind.__name__} for {what}, got {type(raw).__name__}",
            body=data,
        )


def parse_asset_details(data: bytes) -> Dict[str, AssetDetail]:
    raw = _load_json(data)
    _expect(raw, dict, "asset detail", data)
    try:
        # a null entry decodes to an all-default AssetDetail
        return {
            asset: AssetDetail() if v is None else AssetDetail.model_validate(v)
            for asset, v in raw.items()
        }
    except ValidationError as e:
        raise DecodeError(f"Invalid asset detail payload: {e}", body=data) from e


def parse_coin_infos(data: bytes) -> List[CoinInfo]:
    raw = _load_json(data)
    _expect(raw, list, "coin info", data)
    try:
        return [CoinInfo.model_validate(v) for v in raw]
    except ValidationError as e:
        raise DecodeError(f"Invalid coin info payload: {e}", body=data) from e


def parse_user_assets(data: bytes) -> List[UserAssetRecord]:
    raw = _load_json(data)
    _expect(raw, list, "user asset", data)
    try:
        return [UserAssetRecord.model_validate(v) for v in raw]
    except ValidationError as e:
        raise DecodeError(f"Invalid user asset payload: {e}", body=data) from e


def parse_convert_transfer(data: bytes) -> ConvertTransferResponse:
    raw = _load_json(data)
    _expect(raw, dict, "convert transfer", data)
    try:
        return ConvertTransferResponse.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(f"Invalid convert transfer payload: {e}", body=data) from e
