"""Data layer - parsing upstream payloads into engine snapshots."""

from .parser import SnapshotParser
from .sources import AssetClass, AssetClassifier, InMemoryDataSource, ReserveDataSource

__all__ = [
    "SnapshotParser",
    "AssetClass",
    "AssetClassifier",
    "InMemoryDataSource",
    "ReserveDataSource",
]
