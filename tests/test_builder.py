"""
Test suite for the trade message builder.

Covers:
  - broker leg and fee asset selection
  - fixed-point scaling and rounding
  - nonce and expiration
  - rejection of out-of-range input

Run with:
    pytest tests/test_builder.py -v
"""

from decimal import Decimal

import pytest

from brokerbridge.constants import DEFAULT_EXPIRATION, MAX_SCALED_VALUE
from brokerbridge.exceptions import InvalidAmountError, MalformedPairError, UnknownAssetError
from brokerbridge.settlement import (
    Side,
    SubOrder,
    Trade,
    TradeMessageBuilder,
    from_base_unit,
    to_base_unit,
    to_decimal,
)

from .conftest import ETH, MATCHER_ADDRESS, TIMESTAMP, USDT


def make_trade(amount="10", price="2", timestamp=TIMESTAMP):
    return Trade(amount=Decimal(amount), price=Decimal(price), timestamp=timestamp)


class TestCounterSide:

    def test_buy_sub_order_settles_as_broker_sell(self):
        assert TradeMessageBuilder.counter_side(Side.BUY) is False

    def test_sell_sub_order_settles_as_broker_buy(self):
        assert TradeMessageBuilder.counter_side(Side.SELL) is True

    def test_accepts_plain_strings(self):
        assert TradeMessageBuilder.counter_side("sell") is True

    def test_side_counter(self):
        assert Side.BUY.counter is Side.SELL
        assert Side.SELL.counter is Side.BUY


class TestBuild:

    def test_broker_sell_leg(self, builder):
        message = builder.build(SubOrder("ETH-USDT", Side.BUY), make_trade("10", "2"))

        assert message.buy_side is False
        assert message.base_asset == ETH
        assert message.quote_asset == USDT
        assert message.matcher_fee_asset == USDT
        assert message.amount == 1_000_000_000
        assert message.price == 200_000_000
        # 10 * 2 * 0.002 = 0.04
        assert message.matcher_fee == 4_000_000

    def test_broker_buy_leg(self, builder):
        message = builder.build(SubOrder("ETH-USDT", Side.SELL), make_trade("10", "2"))

        assert message.buy_side is True
        assert message.matcher_fee_asset == ETH
        # 10 * 0.002 = 0.02
        assert message.matcher_fee == 2_000_000

    @pytest.mark.parametrize("side", [Side.BUY, Side.SELL])
    def test_fee_asset_follows_leg(self, builder, side):
        message = builder.build(SubOrder("ETH-USDT", side), make_trade())
        expected = message.base_asset if message.buy_side else message.quote_asset
        assert message.matcher_fee_asset == expected

    def test_addresses(self, builder, identity):
        message = builder.build(SubOrder("ETH-USDT", Side.BUY), make_trade())
        assert message.sender_address == identity.sender_address
        assert message.matcher_address == MATCHER_ADDRESS

    def test_nonce_and_expiration(self, builder):
        message = builder.build(SubOrder("ETH-USDT", Side.BUY), make_trade())
        assert message.nonce == TIMESTAMP
        assert message.expiration == TIMESTAMP + DEFAULT_EXPIRATION
        assert DEFAULT_EXPIRATION == 29 * 24 * 60 * 60 * 1000

    def test_message_is_unsigned(self, builder):
        message = builder.build(SubOrder("ETH-USDT", Side.BUY), make_trade())
        assert message.id == ""
        assert message.signature == ""
        assert not message.is_signed

    def test_float_input(self, builder):
        trade = Trade(amount=0.1, price=3.3, timestamp=TIMESTAMP)
        message = builder.build(SubOrder("ETH-USDT", Side.SELL), trade)
        assert message.amount == 10_000_000
        assert message.price == 330_000_000

    def test_zero_amount_allowed(self, builder):
        message = builder.build(SubOrder("ETH-USDT", Side.BUY), make_trade("0", "2"))
        assert message.amount == 0
        assert message.matcher_fee == 0

    def test_malformed_symbol(self, builder):
        with pytest.raises(MalformedPairError):
            builder.build(SubOrder("ETHUSDT", Side.BUY), make_trade())

    def test_unknown_symbol(self, builder):
        with pytest.raises(UnknownAssetError):
            builder.build(SubOrder("BTC-USDT", Side.BUY), make_trade())

    @pytest.mark.parametrize("amount", ["-1", "NaN", "Infinity"])
    def test_invalid_amount(self, builder, amount):
        with pytest.raises(InvalidAmountError):
            builder.build(SubOrder("ETH-USDT", Side.BUY), make_trade(amount=amount))

    @pytest.mark.parametrize("amount", ["1e12", "1e20", "1e25"])
    @pytest.mark.parametrize("side", [Side.BUY, Side.SELL])
    def test_amount_too_large(self, builder, amount, side):
        with pytest.raises(InvalidAmountError):
            builder.build(SubOrder("ETH-USDT", side), make_trade(amount=amount))

    @pytest.mark.parametrize("timestamp", [-1, 1.5, "1600000000000", True])
    def test_invalid_timestamp(self, builder, timestamp):
        with pytest.raises(InvalidAmountError):
            builder.build(SubOrder("ETH-USDT", Side.BUY), make_trade(timestamp=timestamp))

    def test_expiration_overflow(self, builder):
        with pytest.raises(InvalidAmountError):
            builder.build(SubOrder("ETH-USDT", Side.BUY), make_trade(timestamp=MAX_SCALED_VALUE))


class TestScaling:

    def test_round_half_up(self):
        assert to_base_unit(Decimal("1.000000005")) == 100_000_001
        assert to_base_unit(Decimal("1.000000004999")) == 100_000_000
        assert to_base_unit(Decimal("0.000000015")) == 2

    def test_exact_values(self):
        assert to_base_unit(Decimal("1")) == 100_000_000
        assert to_base_unit(Decimal("0.00000001")) == 1

    @pytest.mark.parametrize("value", ["0.1", "1.23456789", "42", "0.00000001", "123456.5"])
    def test_scaling_error_bounded(self, value):
        value = Decimal(value)
        assert abs(from_base_unit(to_base_unit(value)) - value) <= Decimal("0.00000001")

    def test_upper_bound(self):
        assert to_base_unit(from_base_unit(MAX_SCALED_VALUE)) == MAX_SCALED_VALUE
        with pytest.raises(InvalidAmountError):
            to_base_unit(from_base_unit(MAX_SCALED_VALUE + 1))

    @pytest.mark.parametrize("value", ["1e25", "123456789012345678901234567890"])
    def test_values_beyond_decimal_precision(self, value):
        with pytest.raises(InvalidAmountError, match="64 bits"):
            to_base_unit(Decimal(value), "amount")

    @pytest.mark.parametrize("value", [True, "abc", None, [1]])
    def test_to_decimal_rejects_non_numbers(self, value):
        with pytest.raises(InvalidAmountError):
            to_decimal(value)

    def test_to_decimal_accepts_strings_and_ints(self):
        assert to_decimal("1.5") == Decimal("1.5")
        assert to_decimal(3) == Decimal(3)
