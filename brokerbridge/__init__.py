"""
Broker Settlement Bridge

Converts matched trades into signed settlement messages and relays them to
the settlement hub; receives the hub's order callbacks.
"""

from .constants import BROKER_VERSION

__version__ = BROKER_VERSION
