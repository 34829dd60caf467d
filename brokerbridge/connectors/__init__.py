from .base import Connector, StaticConnector

__all__ = ["Connector", "StaticConnector"]
