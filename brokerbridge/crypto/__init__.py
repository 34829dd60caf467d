"""
Broker Bridge Crypto Module

Cryptographic primitives for settlement messages:
- secp256k1 signing key and address derivation
- Keccak-256 hashing
- EIP-712 typed structured-data signing and signer recovery
"""

from .keys import PrivateKey
from .hashing import keccak256, keccak256_hex
from .signing import sign_typed_data, recover_typed_data_signer, typed_data_hash

__all__ = [
    "PrivateKey",
    "keccak256",
    "keccak256_hex",
    "sign_typed_data",
    "recover_typed_data_signer",
    "typed_data_hash",
]
