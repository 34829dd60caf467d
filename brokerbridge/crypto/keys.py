"""
Broker Bridge Crypto Keys Module

secp256k1 key handling for the broker's settlement signing key.
"""

from eth_keys.datatypes import PrivateKey as EthPrivateKey
from eth_utils import decode_hex, encode_hex

from ..exceptions import KeyInitError


class PrivateKey:
    """
    secp256k1 private key used to sign settlement messages.

    Wraps eth-keys PrivateKey. The address is derived once, on construction.
    """

    def __init__(self, key_bytes: bytes):
        """
        Initialize from raw 32-byte private key.

        Args:
            key_bytes: 32 bytes of private key data

        Raises:
            KeyInitError: If key bytes are invalid
        """
        if len(key_bytes) != 32:
            raise KeyInitError(f"Private key must be 32 bytes, got {len(key_bytes)}")

        try:
            self._key = EthPrivateKey(key_bytes)
        except Exception as e:
            raise KeyInitError(f"Invalid private key: {e}") from e

        self._address = encode_hex(self._key.public_key.to_canonical_address())

    @classmethod
    def from_hex(cls, hex_str: str) -> "PrivateKey":
        """
        Create from hex string.

        Args:
            hex_str: Hex-encoded private key (with or without 0x prefix)

        Returns:
            PrivateKey instance
        """
        if not isinstance(hex_str, str) or not hex_str.strip():
            raise KeyInitError("Private key is empty")
        try:
            key_bytes = decode_hex(hex_str.strip())
        except ValueError as e:
            raise KeyInitError(f"Private key is not valid hex: {e}") from e
        return cls(key_bytes)

    @property
    def address(self) -> str:
        """Lowercase 0x-prefixed address of the key's public half."""
        return self._address

    def to_bytes(self) -> bytes:
        """Get raw private key bytes."""
        return self._key.to_bytes()

    def __repr__(self) -> str:
        # Never print key material
        return f"PrivateKey(address={self._address})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, PrivateKey):
            return False
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._address)
