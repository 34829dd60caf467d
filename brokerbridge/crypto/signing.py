"""
Broker Bridge Crypto Signing Module

EIP-712 typed structured-data signing with secp256k1.
"""

from typing import Any, Dict

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import encode_hex

from .hashing import keccak256
from .keys import PrivateKey


def typed_data_hash(typed_data: Dict[str, Any]) -> bytes:
    """
    Compute the EIP-712 digest that is actually signed.

    keccak256(0x19 0x01 domainSeparator structHash)

    Args:
        typed_data: Full typed-data object (types, domain, primaryType, message)

    Returns:
        32-byte digest
    """
    signable = encode_typed_data(full_message=typed_data)
    return keccak256(b'\x19' + signable.version + signable.header + signable.body)


def sign_typed_data(private_key: PrivateKey, typed_data: Dict[str, Any]) -> str:
    """
    Sign typed data (EIP-712, v4 encoding).

    Signing is deterministic (RFC 6979): the same key and typed data always
    produce the same signature.

    Args:
        private_key: PrivateKey to sign with
        typed_data: Full typed-data object

    Returns:
        65-byte signature (r || s || v, v in {27, 28}) as 0x-prefixed hex
    """
    signable = encode_typed_data(full_message=typed_data)
    signed = Account.sign_message(signable, private_key=private_key.to_bytes())
    return encode_hex(signed.signature)


def recover_typed_data_signer(typed_data: Dict[str, Any], signature: str) -> str:
    """
    Recover the signer address of an EIP-712 signature.

    Args:
        typed_data: Full typed-data object that was signed
        signature: 0x-prefixed hex signature

    Returns:
        Lowercase 0x-prefixed signer address
    """
    signable = encode_typed_data(full_message=typed_data)
    return Account.recover_message(signable, signature=signature).lower()
