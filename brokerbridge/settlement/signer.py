"""
Settlement Message Signer

Computes the message id and the EIP-712 signature of a SettlementMessage.

Message id (recomputed bit-for-bit by the hub):

    keccak256(
        0x03
        || senderAddress || matcherAddress
        || baseAsset || quoteAsset || matcherFeeAsset      20 bytes each
        || amount || price || matcherFee
        || nonce || expiration                             8 bytes big-endian each
        || buySide                                         0x01 / 0x00
    )

The signature covers the same fields as an ``Order`` struct under the
fixed ``DOMAIN_DATA`` separator.
"""

from dataclasses import replace
from typing import Any, Dict

from eth_utils import decode_hex, to_canonical_address

from ..constants import DOMAIN_DATA, DOMAIN_TYPE, ORDER_HASH_PREFIX, ORDER_TYPE
from ..crypto import keccak256_hex, recover_typed_data_signer, sign_typed_data
from ..exceptions import UnsignedMessageError
from .identity import BrokerIdentity
from .models import SettlementMessage


def _long_bytes(value: int) -> bytes:
    return value.to_bytes(8, byteorder='big', signed=True)


def pack_message(message: SettlementMessage) -> bytes:
    """Packed byte layout hashed into the message id."""
    parts = [
        ORDER_HASH_PREFIX,
        to_canonical_address(message.sender_address),
        to_canonical_address(message.matcher_address),
        to_canonical_address(message.base_asset),
        to_canonical_address(message.quote_asset),
        to_canonical_address(message.matcher_fee_asset),
        _long_bytes(message.amount),
        _long_bytes(message.price),
        _long_bytes(message.matcher_fee),
        _long_bytes(message.nonce),
        _long_bytes(message.expiration),
        b'\x01' if message.buy_side else b'\x00',
    ]
    return b"".join(parts)


def hash_message(message: SettlementMessage) -> str:
    """Message id: 0x-prefixed keccak256 of the packed fields."""
    return keccak256_hex(pack_message(message))


def build_typed_data(message: SettlementMessage) -> Dict[str, Any]:
    """EIP-712 typed-data object for a settlement message."""
    domain = dict(DOMAIN_DATA)
    domain["salt"] = decode_hex(DOMAIN_DATA["salt"])
    return {
        "types": {
            "EIP712Domain": DOMAIN_TYPE,
            "Order": ORDER_TYPE,
        },
        "domain": domain,
        "primaryType": "Order",
        "message": message.order_fields(),
    }


class MessageSigner:
    """
    Signs settlement messages with the broker key.

    Holds nothing but the immutable identity, so one instance can sign
    concurrent trades.
    """

    def __init__(self, identity: BrokerIdentity):
        self.identity = identity

    @property
    def address(self) -> str:
        return self.identity.sender_address

    def typed_data(self, message: SettlementMessage) -> Dict[str, Any]:
        return build_typed_data(message)

    def sign(self, message: SettlementMessage) -> SettlementMessage:
        """Return a copy of *message* with its id and then its signature set."""
        message_id = hash_message(message)
        signature = sign_typed_data(self.identity.private_key, build_typed_data(message))
        return replace(message, id=message_id, signature=signature)

    def recover_signer(self, message: SettlementMessage) -> str:
        """Address that produced the message's signature."""
        if not message.is_signed:
            raise UnsignedMessageError("Message has no signature to recover")
        return recover_typed_data_signer(build_typed_data(message), message.signature)

    def verify(self, message: SettlementMessage) -> bool:
        """Check the id against the fields and the signature against the broker address."""
        if not message.is_signed:
            return False
        if hash_message(message) != message.id:
            return False
        return self.recover_signer(message) == self.address
