"""Aave asset classification."""

from typing import Iterable, Optional

from lendingrisk.data.sources.base import AssetClassifier

# Stablecoins eligible for borrowing in isolation mode
STABLE_ASSET_SYMBOLS = (
    "DAI",
    "USDC",
    "USDT",
    "TUSD",
    "BUSD",
    "GUSD",
    "SUSD",
    "USDP",
    "PAX",
    "FEI",
    "FRAX",
    "LUSD",
    "GHO",
    "EURS",
    "JEUR",
    "AGEUR",
    "MAI",
    "USDC.E",
)


class StaticAssetClassifier(AssetClassifier):
    """Classifies assets against a fixed set of stablecoin symbols."""

    def __init__(self, stable_symbols: Optional[Iterable[str]] = None):
        symbols = STABLE_ASSET_SYMBOLS if stable_symbols is None else stable_symbols
        self.stable_symbols = frozenset(symbol.strip().upper() for symbol in symbols)

    def is_stable_asset(self, symbol: str) -> bool:
        return symbol.strip().upper() in self.stable_symbols
