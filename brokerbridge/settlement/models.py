"""
Settlement Data Model

Trade and sub-order records consumed from the matching engine, and the
SettlementMessage the broker signs and relays to the hub.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict


class Side(str, Enum):
    """Order side."""
    BUY = "buy"
    SELL = "sell"

    @property
    def counter(self) -> Side:
        return Side.SELL if self is Side.BUY else Side.BUY


@dataclass(frozen=True)
class Trade:
    """A fill produced by the matching engine."""
    amount: Decimal
    price: Decimal
    timestamp: int                      # milliseconds


@dataclass(frozen=True)
class SubOrder:
    """The slice of an order that a trade was matched against."""
    symbol: str                         # "BASE-QUOTE"
    side: Side


@dataclass(frozen=True)
class SettlementMessage:
    """
    Canonical signed unit for one matched trade.

    Field order is the order the hub hashes and verifies them in.
    ``id`` and ``signature`` stay empty until MessageSigner fills both.
    """
    sender_address: str
    matcher_address: str
    base_asset: str
    quote_asset: str
    matcher_fee_asset: str
    amount: int
    price: int
    matcher_fee: int
    nonce: int
    expiration: int
    buy_side: bool
    id: str = ""
    signature: str = ""

    @property
    def is_signed(self) -> bool:
        return bool(self.id) and bool(self.signature)

    def order_fields(self) -> Dict[str, Any]:
        """Signed fields keyed by their typed-data names."""
        return {
            "senderAddress": self.sender_address,
            "matcherAddress": self.matcher_address,
            "baseAsset": self.base_asset,
            "quoteAsset": self.quote_asset,
            "matcherFeeAsset": self.matcher_fee_asset,
            "amount": self.amount,
            "price": self.price,
            "matcherFee": self.matcher_fee,
            "nonce": self.nonce,
            "expiration": self.expiration,
            "buySide": 1 if self.buy_side else 0,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Wire form pushed to the hub."""
        return {"id": self.id, **self.order_fields(), "signature": self.signature}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SettlementMessage:
        return cls(
            sender_address=data["senderAddress"],
            matcher_address=data["matcherAddress"],
            base_asset=data["baseAsset"],
            quote_asset=data["quoteAsset"],
            matcher_fee_asset=data["matcherFeeAsset"],
            amount=int(data["amount"]),
            price=int(data["price"]),
            matcher_fee=int(data["matcherFee"]),
            nonce=int(data["nonce"]),
            expiration=int(data["expiration"]),
            buy_side=bool(int(data["buySide"])),
            id=data.get("id", ""),
            signature=data.get("signature", ""),
        )
