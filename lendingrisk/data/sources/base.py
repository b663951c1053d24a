"""Inbound collaborator interfaces.

The engine depends on these abstractions only; concrete implementations
(API clients, on-chain readers, static lists) live outside the engine.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from lendingrisk.core.models import (
    PoolSnapshot,
    ReferenceCurrencyConversion,
    ReserveSnapshot,
    UserReservePosition,
)


class AssetClass(Enum):
    """Asset classification used by isolation mode eligibility."""

    STABLE = "stable"
    VOLATILE = "volatile"


class AssetClassifier(ABC):
    """Answers whether an asset is a stablecoin."""

    @abstractmethod
    def is_stable_asset(self, symbol: str) -> bool:
        """Return True if ``symbol`` is classified as a stable asset."""
        ...

    def classify(self, symbol: str) -> AssetClass:
        return AssetClass.STABLE if self.is_stable_asset(symbol) else AssetClass.VOLATILE


class ReserveDataSource(ABC):
    """Supplies reserve and user position snapshots.

    Implementations must deliver decimal fields as exact strings or integers,
    never binary floats.
    """

    @abstractmethod
    def get_reserves(self) -> List[ReserveSnapshot]:
        """Fetch all reserves of the pool."""
        ...

    @abstractmethod
    def get_user_positions(self, user_address: str) -> List[UserReservePosition]:
        """Fetch a user's reserve positions."""
        ...

    @abstractmethod
    def get_conversion(self) -> ReferenceCurrencyConversion:
        """Fetch the reference currency to USD conversion."""
        ...

    @abstractmethod
    def get_user_emode_category(self, user_address: str) -> int:
        """Fetch the user's active e-mode category (0 = none)."""
        ...

    def get_pool_snapshot(self, user_address: str) -> PoolSnapshot:
        """Fetch everything one evaluation needs in a single snapshot."""
        return PoolSnapshot(
            reserves=tuple(self.get_reserves()),
            conversion=self.get_conversion(),
            positions=tuple(self.get_user_positions(user_address)),
            user_emode_category_id=self.get_user_emode_category(user_address),
        )
