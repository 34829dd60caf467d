"""
Broker Identity

The broker's signing key, its derived address and the configured matcher
address. Built once at startup and shared read-only by the message builder
and the signer.
"""

from dataclasses import dataclass, field

from eth_utils import is_hex_address

from ..crypto import PrivateKey
from ..exceptions import ConfigurationError
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class BrokerIdentity:
    matcher_address: str
    private_key: PrivateKey = field(repr=False)

    def __post_init__(self):
        if not is_hex_address(self.matcher_address):
            raise ConfigurationError(f"Invalid matcher address: {self.matcher_address!r}")
        object.__setattr__(self, "matcher_address", self.matcher_address.lower())

    @property
    def sender_address(self) -> str:
        return self.private_key.address

    @classmethod
    def from_private_key(cls, private_key_hex: str, matcher_address: str) -> "BrokerIdentity":
        """
        Load the signing key and derive the broker address.

        Raises:
            KeyInitError: if the key cannot be parsed. The broker cannot start without it.
        """
        identity = cls(matcher_address=matcher_address, private_key=PrivateKey.from_hex(private_key_hex))
        logger.info(f"Broker address={identity.sender_address}")
        return identity
