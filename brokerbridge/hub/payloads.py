"""
Hub Payload Records

One record per hub call kind. Inbound payloads are validated here, at the
boundary, so nothing past the callback surface handles untyped dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from ..constants import CALLBACK_ERROR_CODE, HUB_STATUS_REGISTERED, PAIR_SEPARATOR
from ..exceptions import PayloadError
from ..settlement.models import Side


def _require(data: Mapping[str, Any], key: str) -> Any:
    if not isinstance(data, Mapping):
        raise PayloadError(f"Payload must be a JSON object, got {type(data).__name__}")
    value = data.get(key)
    if value is None or value == "":
        raise PayloadError(f"'{key}' not found in body")
    return value


def _decimal(data: Mapping[str, Any], key: str) -> Decimal:
    raw = _require(data, key)
    if isinstance(raw, bool):
        raise PayloadError(f"'{key}' must be a number")
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        raise PayloadError(f"'{key}' must be a number, got {raw!r}") from None
    if not value.is_finite() or value <= 0:
        raise PayloadError(f"'{key}' must be a positive number, got {raw!r}")
    return value


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BrokerRegistration:
    """Registration handshake body."""
    address: str
    callback_url: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def with_callback_url(self, callback_url: str) -> BrokerRegistration:
        return replace(self, callback_url=callback_url)

    def to_dict(self) -> Dict[str, Any]:
        return {**self.extra, "address": self.address, "callbackUrl": self.callback_url}


@dataclass(frozen=True)
class RegistrationResponse:
    status: str
    broker: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_new_registration(self) -> bool:
        return self.status == HUB_STATUS_REGISTERED

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RegistrationResponse:
        if not isinstance(data, Mapping):
            raise PayloadError(f"Registration response must be a JSON object, got {type(data).__name__}")
        broker = data.get("broker")
        return cls(
            status=str(data.get("status") or ""),
            broker=str(broker) if broker is not None else None,
            raw=dict(data),
        )


@dataclass(frozen=True)
class BalanceSnapshot:
    """Per-exchange asset balances of the broker."""
    address: str
    balances: Dict[str, Dict[str, Decimal]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "balances": {
                exchange: {asset: str(amount) for asset, amount in assets.items()}
                for exchange, assets in self.balances.items()
            },
        }


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CreateOrderRequest:
    """Hub request to place an order on one of the broker's exchanges."""
    id: str
    exchange: str
    symbol: str
    side: Side
    price: Decimal
    amount: Decimal
    type: str = "limit"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CreateOrderRequest:
        symbol = str(_require(data, "symbol"))
        parts = symbol.split(PAIR_SEPARATOR)
        if len(parts) != 2 or not all(parts):
            raise PayloadError(f"Malformed trading pair {symbol!r}")

        side = _require(data, "side")
        try:
            side = Side(str(side).lower())
        except ValueError:
            raise PayloadError(f"'side' must be 'buy' or 'sell', got {side!r}") from None

        return cls(
            id=str(_require(data, "id")),
            exchange=str(_require(data, "exchange")),
            symbol=symbol,
            side=side,
            price=_decimal(data, "price"),
            amount=_decimal(data, "amount"),
            type=str(data.get("type") or "limit"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "exchange": self.exchange,
            "symbol": self.symbol,
            "side": self.side.value,
            "price": str(self.price),
            "amount": str(self.amount),
            "type": self.type,
        }


@dataclass(frozen=True)
class CancelOrderRequest:
    id: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CancelOrderRequest:
        return cls(id=str(_require(data, "id")))


@dataclass(frozen=True)
class ErrorEnvelope:
    """Error body returned on the callback surface."""
    message: str
    code: int = CALLBACK_ERROR_CODE

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}
