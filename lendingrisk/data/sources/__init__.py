"""Data source interfaces and implementations."""

from .base import AssetClass, AssetClassifier, ReserveDataSource
from .memory import InMemoryDataSource

__all__ = [
    "AssetClass",
    "AssetClassifier",
    "ReserveDataSource",
    "InMemoryDataSource",
]
