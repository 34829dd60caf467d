"""
Broker Bridge TOML Configuration Loader

Loads config.toml at startup with environment variable overrides.

Environment variable mapping:
    [broker] matcher_address → BROKER_MATCHER_ADDRESS
    [broker] callback_url    → BROKER_CALLBACK_URL
    [hub] url                → BROKER_HUB_URL
    [hub] blockchain_url     → BROKER_BLOCKCHAIN_URL
    [hub] timeout            → BROKER_HUB_TIMEOUT
    [server] host / port     → BROKER_HOST / BROKER_PORT

The signing key is read from BROKER_PRIVATE_KEY only, never from TOML.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from eth_utils import is_hex_address

from ..constants import BROKER_HOST, BROKER_PORT, CONNECTION_TIMEOUT, DEFAULT_ASSETS
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Section dataclasses
# ---------------------------------------------------------------------------


@dataclass
class BrokerSectionConfig:
    """[broker] section."""
    matcher_address: str = ""
    callback_url: str = "http://127.0.0.1:3001"
    private_key: str = field(default="", repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BrokerSectionConfig":
        if "private_key" in data:
            logger.warning("Ignoring private_key in config file, set BROKER_PRIVATE_KEY instead")
        return cls(
            matcher_address=data.get("matcher_address", ""),
            callback_url=data.get("callback_url", "http://127.0.0.1:3001"),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("BROKER_MATCHER_ADDRESS"):
            self.matcher_address = v
        if v := os.environ.get("BROKER_CALLBACK_URL"):
            self.callback_url = v
        if v := os.environ.get("BROKER_PRIVATE_KEY"):
            self.private_key = v


@dataclass
class HubSectionConfig:
    """[hub] section."""
    url: str = "http://127.0.0.1:3000/api/broker"
    blockchain_url: str = "http://127.0.0.1:3000/api"
    callback_url: str = "http://127.0.0.1:3001"
    timeout: float = CONNECTION_TIMEOUT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HubSectionConfig":
        url = data.get("url", "http://127.0.0.1:3000/api/broker")
        return cls(
            url=url.rstrip("/"),
            blockchain_url=data.get("blockchain_url", "http://127.0.0.1:3000/api").rstrip("/"),
            timeout=float(data.get("timeout", CONNECTION_TIMEOUT)),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("BROKER_HUB_URL"):
            self.url = v.rstrip("/")
        if v := os.environ.get("BROKER_BLOCKCHAIN_URL"):
            self.blockchain_url = v.rstrip("/")
        if v := os.environ.get("BROKER_HUB_TIMEOUT"):
            self.timeout = float(v)


@dataclass
class ServerSectionConfig:
    """[server] section."""
    host: str = str(BROKER_HOST)
    port: int = BROKER_PORT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerSectionConfig":
        return cls(
            host=data.get("host", str(BROKER_HOST)),
            port=int(data.get("port", BROKER_PORT)),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("BROKER_HOST"):
            self.host = v
        if v := os.environ.get("BROKER_PORT"):
            self.port = int(v)


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


@dataclass
class BrokerConfig:
    """Root configuration, one instance per process."""
    broker: BrokerSectionConfig = field(default_factory=BrokerSectionConfig)
    hub: HubSectionConfig = field(default_factory=HubSectionConfig)
    server: ServerSectionConfig = field(default_factory=ServerSectionConfig)
    assets: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ASSETS))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BrokerConfig":
        cfg = cls(
            broker=BrokerSectionConfig.from_dict(data.get("broker", {})),
            hub=HubSectionConfig.from_dict(data.get("hub", {})),
            server=ServerSectionConfig.from_dict(data.get("server", {})),
            assets=dict(data.get("assets") or DEFAULT_ASSETS),
        )
        cfg._sync_callback_url()
        return cfg

    @classmethod
    def from_file(cls, config_path: str) -> "BrokerConfig":
        """
        Load configuration from a TOML file.

        A missing file is not an error: defaults plus environment overrides
        are used.
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", config_path)
            cfg = cls()
            cfg.apply_env()
            return cfg

        with open(path, "rb") as f:
            try:
                raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        return cfg

    # --- env overrides ----------------------------------------------------

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.broker.apply_env()
        self.hub.apply_env()
        self.server.apply_env()
        self._sync_callback_url()

    def _sync_callback_url(self) -> None:
        self.hub.callback_url = self.broker.callback_url.rstrip("/")

    # --- validation -------------------------------------------------------

    def validate(self) -> List[str]:
        """
        Collect configuration problems.

        Returns:
            List of human-readable errors, empty when the config is usable.
        """
        errors: List[str] = []
        if not self.broker.private_key:
            errors.append("BROKER_PRIVATE_KEY is not set")
        if not is_hex_address(self.broker.matcher_address or ""):
            errors.append(f"broker.matcher_address is not an address: {self.broker.matcher_address!r}")
        for name, url in (
            ("broker.callback_url", self.broker.callback_url),
            ("hub.url", self.hub.url),
            ("hub.blockchain_url", self.hub.blockchain_url),
        ):
            if not url.startswith(("http://", "https://")):
                errors.append(f"{name} must be an http(s) URL: {url!r}")
        if self.hub.timeout <= 0:
            errors.append("hub.timeout must be positive")
        if not self.assets:
            errors.append("assets table is empty")
        return errors

    def require_valid(self) -> None:
        errors = self.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))


def load_config(path: Optional[str] = None) -> BrokerConfig:
    """
    Load broker configuration.

    Resolution order:
        1. Explicit *path* argument
        2. BROKER_CONFIG env var
        3. ./config.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("BROKER_CONFIG", "config.toml")

    return BrokerConfig.from_file(path)
