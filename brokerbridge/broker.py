"""
Broker

Wires the settlement pipeline for one broker process:

    (SubOrder, Trade) -> TradeMessageBuilder -> MessageSigner -> HubClient.send_trade

and owns the hub lifecycle (connect, register, balance pushes, disconnect).
"""

from collections import OrderedDict
from typing import Any, Iterable, Optional

import httpx

from .config import BrokerConfig
from .connectors import Connector
from .exceptions import KeyInitError
from .hub import BalanceSnapshot, BrokerRegistration, HubClient, HubServer, Logged, TradeAck
from .logger import get_logger
from .settlement import (
    AssetRegistry,
    BrokerIdentity,
    MessageSigner,
    SettlementMessage,
    SubOrder,
    Trade,
    TradeMessageBuilder,
)

logger = get_logger(__name__)

# Nonces remembered for collision warnings
MAX_TRACKED_NONCES = 4096


class Broker:

    def __init__(
        self,
        config: BrokerConfig,
        client: Optional[httpx.AsyncClient] = None,
        connectors: Iterable[Connector] = (),
    ):
        """
        Raises:
            KeyInitError: the private key is missing or cannot be loaded
            ConfigurationError: config.validate() reported other problems
        """
        if not config.broker.private_key:
            raise KeyInitError("BROKER_PRIVATE_KEY is not set")
        config.require_valid()
        self.config = config

        self.registry = AssetRegistry(config.assets)
        self.identity = BrokerIdentity.from_private_key(
            config.broker.private_key, config.broker.matcher_address
        )
        self.builder = TradeMessageBuilder(self.registry, self.identity)
        self.signer = MessageSigner(self.identity)

        self.hub = HubClient(config.hub, client=client)
        self.server = HubServer()
        self.connectors = list(connectors)
        for connector in self.connectors:
            connector.set_on_trade_listener(self.settle_trade)

        self._recent_nonces: "OrderedDict[int, str]" = OrderedDict()

    @property
    def address(self) -> str:
        return self.identity.sender_address

    # -----------------------------------------------------------------
    #  Lifecycle
    # -----------------------------------------------------------------

    async def start(self) -> Logged:
        await self.hub.connect()
        return await self.hub.register(BrokerRegistration(address=self.address))

    async def stop(self) -> None:
        for connector in self.connectors:
            await connector.close()
        await self.hub.disconnect()

    # -----------------------------------------------------------------
    #  Settlement
    # -----------------------------------------------------------------

    def sign_trade(self, sub_order: SubOrder, trade: Trade) -> SettlementMessage:
        """Build and sign the settlement message for one trade."""
        message = self.signer.sign(self.builder.build(sub_order, trade))
        self._track_nonce(message)
        return message

    async def settle_trade(self, order: Any, sub_order: SubOrder, trade: Trade) -> TradeAck:
        """
        Sign a trade and relay it to the hub.

        Raises:
            HubError: the trade did not reach the hub and must be reconciled
                by the caller
        """
        message = self.sign_trade(sub_order, trade)
        return await self.hub.send_trade(order, message)

    def _track_nonce(self, message: SettlementMessage) -> None:
        # Two trades with the same timestamp share a nonce
        previous = self._recent_nonces.get(message.nonce)
        if previous is not None and previous != message.id:
            logger.warning(
                f"Nonce {message.nonce} reused: {message.id} and {previous} were built from trades with the same timestamp"
            )
        self._recent_nonces[message.nonce] = message.id
        self._recent_nonces.move_to_end(message.nonce)
        while len(self._recent_nonces) > MAX_TRACKED_NONCES:
            self._recent_nonces.popitem(last=False)

    # -----------------------------------------------------------------
    #  Balances
    # -----------------------------------------------------------------

    async def collect_balances(self) -> BalanceSnapshot:
        balances = {}
        for connector in self.connectors:
            try:
                balances[connector.exchange] = await connector.get_balances()
            except Exception as e:
                logger.error(f"Could not read balances from {connector.exchange}: {e}")
        return BalanceSnapshot(address=self.address, balances=balances)

    async def push_balances(self) -> Logged:
        return await self.hub.send_balances(await self.collect_balances())
