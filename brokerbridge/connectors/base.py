"""
Exchange Connector Interface

Contract the broker consumes from per-exchange connectors. Implementations
(order execution on external venues) live outside this package.

A connector reports fills through the trade listener set by the broker;
the listener settles each fill with the hub.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, Optional

from ..exceptions import HandlerError
from ..settlement.models import SubOrder, Trade

TradeListener = Callable[[Any, SubOrder, Trade], Awaitable[Any]]


class Connector(ABC):
    """One exchange account the broker trades through."""

    exchange: str = ""
    on_trade: Optional[TradeListener] = None

    @abstractmethod
    async def get_balances(self) -> Dict[str, Decimal]:
        """Free balance per asset symbol."""

    def set_on_trade_listener(self, listener: TradeListener) -> None:
        self.on_trade = listener

    async def emit_trade(self, order: Any, sub_order: SubOrder, trade: Trade) -> Any:
        """
        Hand a fill to the trade listener.

        Raises:
            HandlerError: no listener is set
            HubError: raised by the listener when the fill did not settle
        """
        if self.on_trade is None:
            raise HandlerError(f"No trade listener set on {self.exchange} connector")
        return await self.on_trade(order, sub_order, trade)

    async def close(self) -> None:
        """Release connections held by the connector."""


class StaticConnector(Connector):
    """Connector reporting fixed balances. Used for dry runs and tests."""

    def __init__(self, exchange: str, balances: Dict[str, Decimal]):
        self.exchange = exchange
        self.balances = dict(balances)

    async def get_balances(self) -> Dict[str, Decimal]:
        return dict(self.balances)
