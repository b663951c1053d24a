"""Aave v3 protocol specifics."""

from lendingrisk.protocols.aave.assets import STABLE_ASSET_SYMBOLS, StaticAssetClassifier

__all__ = [
    "STABLE_ASSET_SYMBOLS",
    "StaticAssetClassifier",
]
