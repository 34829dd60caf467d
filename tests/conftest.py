"""Shared fixtures for the broker bridge test suite."""

import pytest

from brokerbridge.config import HubSectionConfig
from brokerbridge.settlement import AssetRegistry, BrokerIdentity, MessageSigner, TradeMessageBuilder

# Well-known test key; never holds funds
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
MATCHER_ADDRESS = "0x1ff516e5ce789085cff86d37fc27747df852a80a"

ETH = "0x0000000000000000000000000000000000000000"
USDT = "0xfc1cd13a7f126efd823e373c4086f69beb8611c2"
ORN = "0xfc25454ac2db9f6ab36bc0b0b034b41061c00982"

TIMESTAMP = 1_600_000_000_000


@pytest.fixture
def registry():
    return AssetRegistry()


@pytest.fixture
def identity():
    return BrokerIdentity.from_private_key(PRIVATE_KEY, MATCHER_ADDRESS)


@pytest.fixture
def builder(registry, identity):
    return TradeMessageBuilder(registry, identity)


@pytest.fixture
def signer(identity):
    return MessageSigner(identity)


@pytest.fixture
def hub_settings():
    return HubSectionConfig(
        url="http://hub.test/api/broker",
        blockchain_url="http://hub.test/api",
        callback_url="http://broker.test",
        timeout=5.0,
    )
