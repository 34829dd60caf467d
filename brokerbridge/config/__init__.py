"""
Broker Bridge Configuration

Loads config.toml at startup.
Environment variables override TOML values.
"""

from .loader import (
    BrokerConfig,
    BrokerSectionConfig,
    HubSectionConfig,
    ServerSectionConfig,
    load_config,
)

__all__ = [
    "BrokerConfig",
    "BrokerSectionConfig",
    "HubSectionConfig",
    "ServerSectionConfig",
    "load_config",
]
