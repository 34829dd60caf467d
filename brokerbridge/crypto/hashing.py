"""
Broker Bridge Hashing Module

Keccak-256, the hash the hub uses to recompute settlement message ids.
"""

from typing import Union

from eth_hash.auto import keccak as _keccak
from eth_utils import decode_hex


def keccak256(data: Union[bytes, str]) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum standard).

    Args:
        data: Input bytes or hex string

    Returns:
        32-byte hash
    """
    if isinstance(data, str):
        data = decode_hex(data)
    return _keccak(data)


def keccak256_hex(data: Union[bytes, str]) -> str:
    """
    Compute Keccak-256 hash and return as hex string.

    Args:
        data: Input bytes or hex string

    Returns:
        Hex string with 0x prefix
    """
    return '0x' + keccak256(data).hex()
