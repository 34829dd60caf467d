"""
Broker Bridge Exceptions

Custom exception classes for the broker settlement bridge.
"""

from typing import Optional


class BrokerBridgeException(Exception):
    """Base exception for the broker bridge."""
    pass


class UnknownAssetError(BrokerBridgeException):
    """Asset symbol or identifier is not in the asset table."""
    pass


class MalformedPairError(BrokerBridgeException):
    """Trading pair symbol does not split into exactly two symbols."""
    pass


class InvalidAmountError(BrokerBridgeException):
    """Decimal input is non-finite, negative or does not fit in 64 bits."""
    pass


class KeyInitError(BrokerBridgeException):
    """Signing key could not be loaded. Fatal at startup."""
    pass


class UnsignedMessageError(BrokerBridgeException):
    """Settlement message is missing its id or signature."""
    pass


class PayloadError(BrokerBridgeException):
    """Hub payload failed validation."""
    pass


class HandlerError(BrokerBridgeException):
    """Registered callback handler failed or is missing."""
    pass


class HubError(BrokerBridgeException):
    """Hub communication error."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class HubUnreachableError(HubError):
    """Hub could not be reached at the transport level."""
    pass


class HubRejectedError(HubError):
    """Hub answered with a non-2xx status or an unparsable body."""
    pass


class ConfigurationError(BrokerBridgeException):
    """Configuration error."""
    pass
