"""
Asset Registry

Static, bijective mapping between asset symbols ("ETH") and on-chain asset
identifiers ("0x0000...0000"), plus trading-pair composition.
"""

from typing import Dict, Mapping, Optional, Tuple

from eth_utils import is_hex_address

from ..constants import DEFAULT_ASSETS, PAIR_SEPARATOR
from ..exceptions import ConfigurationError, MalformedPairError, UnknownAssetError


class AssetRegistry:
    """
    Read-only asset table.

    Identifiers are normalized to lowercase so lookups are case-insensitive.
    """

    def __init__(self, assets: Optional[Mapping[str, str]] = None):
        table = DEFAULT_ASSETS if assets is None else assets

        self._by_symbol: Dict[str, str] = {}
        self._by_asset: Dict[str, str] = {}

        for symbol, asset_id in table.items():
            if not symbol or PAIR_SEPARATOR in symbol:
                raise ConfigurationError(f"Invalid asset symbol: {symbol!r}")
            if not is_hex_address(asset_id):
                raise ConfigurationError(f"Invalid asset address for {symbol}: {asset_id!r}")
            asset_id = asset_id.lower()
            if asset_id in self._by_asset:
                raise ConfigurationError(
                    f"Asset {asset_id} mapped to both {self._by_asset[asset_id]} and {symbol}"
                )
            self._by_symbol[symbol] = asset_id
            self._by_asset[asset_id] = symbol

    def symbol_of(self, asset_id: str) -> str:
        try:
            return self._by_asset[asset_id.lower()]
        except (KeyError, AttributeError):
            raise UnknownAssetError(f"Unknown asset {asset_id}") from None

    def asset_of(self, symbol: str) -> str:
        try:
            return self._by_symbol[symbol]
        except (KeyError, TypeError):
            raise UnknownAssetError(f"Unknown asset {symbol}") from None

    def pair_to_assets(self, pair: str) -> Tuple[str, str]:
        """
        Split "BASE-QUOTE" and resolve both halves.

        Raises:
            MalformedPairError: unless the split yields exactly two non-empty symbols
            UnknownAssetError: if either symbol is not in the table
        """
        parts = pair.split(PAIR_SEPARATOR) if isinstance(pair, str) else []
        if len(parts) != 2 or not all(parts):
            raise MalformedPairError(f"Malformed trading pair {pair!r}")
        base, quote = parts
        return self.asset_of(base), self.asset_of(quote)

    def assets_to_pair(self, base_asset: str, quote_asset: str) -> str:
        return f"{self.symbol_of(base_asset)}{PAIR_SEPARATOR}{self.symbol_of(quote_asset)}"

    @property
    def symbols(self) -> Tuple[str, ...]:
        return tuple(self._by_symbol)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._by_symbol

    def __len__(self) -> int:
        return len(self._by_symbol)

    def __repr__(self) -> str:
        return f"AssetRegistry({', '.join(self._by_symbol)})"
