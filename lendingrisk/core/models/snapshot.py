"""Pool snapshot bundling everything one evaluation needs."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from lendingrisk.core.constants import NO_EMODE_CATEGORY
from lendingrisk.core.errors import MissingReserve, MissingUserPosition
from lendingrisk.core.models.position import UserReservePosition
from lendingrisk.core.models.reserve import ReferenceCurrencyConversion, ReserveSnapshot


@dataclass(frozen=True)
class PoolSnapshot:
    """Reserves, one user's positions and the USD conversion at one point in time."""

    reserves: Tuple[ReserveSnapshot, ...]
    conversion: ReferenceCurrencyConversion
    positions: Tuple[UserReservePosition, ...] = field(default_factory=tuple)
    user_emode_category_id: int = NO_EMODE_CATEGORY

    def reserve(self, reserve_id: str) -> ReserveSnapshot:
        """
        Look up a reserve by id.

        Raises:
            MissingReserve: If the snapshot has no such reserve
        """
        for reserve in self.reserves:
            if reserve.id == reserve_id:
                return reserve
        raise MissingReserve(reserve_id)

    def find_position(self, reserve_id: str) -> Optional[UserReservePosition]:
        for position in self.positions:
            if position.reserve_id == reserve_id:
                return position
        return None

    def position(self, reserve_id: str) -> UserReservePosition:
        """
        Look up the user's position in a reserve.

        Raises:
            MissingUserPosition: If the user holds nothing in that reserve
        """
        position = self.find_position(reserve_id)
        if position is None:
            raise MissingUserPosition(reserve_id)
        return position

    @property
    def borrowed_assets(self) -> Tuple[str, ...]:
        """Underlying assets the user currently has debt in."""
        assets = []
        for position in self.positions:
            if position.is_borrower:
                assets.append(self.reserve(position.reserve_id).underlying_asset)
        return tuple(assets)
