# infra/exchange/request.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple, Union

ParamValue = Union[str, int, bool]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class SecurityType(str, Enum):
    NONE = "none"
    API_KEY = "api_key"
    SIGNED = "signed"


def _render(value: ParamValue) -> str:
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Request:
    """
    Immutable description of one REST call.

    Built by RequestBuilder; the transport only reads it.
    """
    method: HttpMethod
    endpoint: str
    sec_type: SecurityType = SecurityType.NONE
    params: Mapping[str, ParamValue] = field(default_factory=lambda: MappingProxyType({}))

    def param_names(self) -> List[str]:
        return sorted(self.params)

    def query_items(self) -> List[Tuple[str, str]]:
        """
        Params rendered as wire strings, in insertion order.
        """
        return [(k, _render(v)) for k, v in self.params.items()]

    @property
    def needs_api_key(self) -> bool:
        return self.sec_type in (SecurityType.API_KEY, SecurityType.SIGNED)

    @property
    def needs_signature(self) -> bool:
        return self.sec_type == SecurityType.SIGNED


class RequestBuilder:
    """
    Mutable accumulator for a Request. `set_param` is last-write-wins.
    """

    def __init__(
        self,
        method: HttpMethod,
        endpoint: str,
        sec_type: SecurityType = SecurityType.NONE,
    ) -> None:
        self.method = method
        self.endpoint = endpoint
        self.sec_type = sec_type
        self._params: Dict[str, ParamValue] = {}

    def set_param(self, name: str, value: ParamValue) -> "RequestBuilder":
        self._params[name] = value
        return self

    def build(self) -> Request:
        return Request(
            method=self.method,
            endpoint=self.endpoint,
            sec_type=self.sec_type,
            params=MappingProxyType(dict(self._params)),
        )
