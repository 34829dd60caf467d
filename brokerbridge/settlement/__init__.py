"""
Settlement Message Pipeline

Components:
  - AssetRegistry       (symbol <-> on-chain asset id)
  - BrokerIdentity      (signing key, broker and matcher addresses)
  - TradeMessageBuilder (trade -> unsigned SettlementMessage)
  - MessageSigner       (message id + EIP-712 signature)
"""

from .models import Side, Trade, SubOrder, SettlementMessage
from .assets import AssetRegistry
from .identity import BrokerIdentity
from .builder import TradeMessageBuilder, to_base_unit, from_base_unit, to_decimal
from .signer import MessageSigner, hash_message, pack_message, build_typed_data

__all__ = [
    "Side",
    "Trade",
    "SubOrder",
    "SettlementMessage",
    "AssetRegistry",
    "BrokerIdentity",
    "TradeMessageBuilder",
    "to_base_unit",
    "from_base_unit",
    "to_decimal",
    "MessageSigner",
    "hash_message",
    "pack_message",
    "build_typed_data",
]
