"""
Trade Message Builder

Turns a matched (SubOrder, Trade) pair into an unsigned SettlementMessage.

The broker settles as the counterparty of the sub-order, so its leg is the
counter side: a "buy" sub-order settles as a broker sell and vice versa.
The matcher fee is charged in the asset the broker receives:

  - broker buys:  fee = amount * rate,          in the base asset
  - broker sells: fee = amount * price * rate,  in the quote asset

amount, price and fee are scaled to 8-decimal fixed point with
ROUND_HALF_UP. The scaled integers are part of the signed payload, so the
rounding must match the hub's verifier exactly.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from ..constants import (
    DEFAULT_EXPIRATION,
    MATCHER_FEE_RATE,
    MAX_SCALED_VALUE,
    PRICE_DECIMALS,
)
from ..exceptions import InvalidAmountError
from .assets import AssetRegistry
from .identity import BrokerIdentity
from .models import SettlementMessage, Side, SubOrder, Trade

SCALE = Decimal(10) ** PRICE_DECIMALS


def to_decimal(value: Union[Decimal, int, float, str], name: str = "value") -> Decimal:
    """Coerce numeric input to Decimal, rejecting non-finite and negative values."""
    if isinstance(value, bool):
        raise InvalidAmountError(f"{name} must be numeric, got {value!r}")
    try:
        # str() keeps floats at their shortest repr instead of the binary expansion
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmountError(f"{name} is not a number: {value!r}") from None
    if not result.is_finite():
        raise InvalidAmountError(f"{name} must be finite, got {value!r}")
    if result < 0:
        raise InvalidAmountError(f"{name} must be non-negative, got {value!r}")
    return result


def to_base_unit(value: Decimal, name: str = "value") -> int:
    """Scale to fixed point, round half away from zero, check the 64-bit range."""
    try:
        scaled = int((value * SCALE).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # quantize fails once the result outgrows the context precision
        raise InvalidAmountError(f"{name} {value} does not fit in 64 bits after scaling") from None
    if scaled > MAX_SCALED_VALUE:
        raise InvalidAmountError(f"{name} {value} does not fit in 64 bits after scaling")
    return scaled


def from_base_unit(value: int) -> Decimal:
    return Decimal(value) / SCALE


class TradeMessageBuilder:

    def __init__(self, registry: AssetRegistry, identity: BrokerIdentity):
        self.registry = registry
        self.identity = identity

    @staticmethod
    def counter_side(side: Side) -> bool:
        """buySide flag of the broker's leg for a sub-order side."""
        return Side(side).counter is Side.BUY

    @staticmethod
    def matcher_fee(amount: Decimal, price: Decimal, buy_side: bool) -> Decimal:
        if buy_side:
            return amount * MATCHER_FEE_RATE
        return amount * price * MATCHER_FEE_RATE

    def build(self, sub_order: SubOrder, trade: Trade) -> SettlementMessage:
        """
        Build the unsigned settlement message for one trade.

        Raises:
            MalformedPairError, UnknownAssetError: sub-order symbol does not resolve
            InvalidAmountError: amount, price or timestamp out of range
        """
        base_asset, quote_asset = self.registry.pair_to_assets(sub_order.symbol)
        buy_side = self.counter_side(sub_order.side)
        matcher_fee_asset = base_asset if buy_side else quote_asset

        amount = to_decimal(trade.amount, "amount")
        price = to_decimal(trade.price, "price")
        fee = self.matcher_fee(amount, price, buy_side)

        nonce = trade.timestamp
        if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
            raise InvalidAmountError(f"Trade timestamp must be a non-negative integer, got {nonce!r}")
        expiration = nonce + DEFAULT_EXPIRATION
        if expiration > MAX_SCALED_VALUE:
            raise InvalidAmountError(f"Trade timestamp {nonce} does not fit in 64 bits")

        return SettlementMessage(
            sender_address=self.identity.sender_address,
            matcher_address=self.identity.matcher_address,
            base_asset=base_asset,
            quote_asset=quote_asset,
            matcher_fee_asset=matcher_fee_asset,
            amount=to_base_unit(amount, "amount"),
            price=to_base_unit(price, "price"),
            matcher_fee=to_base_unit(fee, "matcher fee"),
            nonce=nonce,
            expiration=expiration,
            buy_side=buy_side,
        )
