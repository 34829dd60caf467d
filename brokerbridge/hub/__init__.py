"""
Broker <-> Hub Protocol

  - HubClient  outbound: registration, balance snapshots, signed trades
  - HubServer  inbound:  create-order and cancel-order callbacks
"""

from .payloads import (
    BalanceSnapshot,
    BrokerRegistration,
    CancelOrderRequest,
    CreateOrderRequest,
    ErrorEnvelope,
    RegistrationResponse,
)
from .results import Logged, TradeAck
from .client import HubClient, HubState
from .server import HubServer

__all__ = [
    "BalanceSnapshot",
    "BrokerRegistration",
    "CancelOrderRequest",
    "CreateOrderRequest",
    "ErrorEnvelope",
    "RegistrationResponse",
    "Logged",
    "TradeAck",
    "HubClient",
    "HubState",
    "HubServer",
]
