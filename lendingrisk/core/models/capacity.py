"""Per-reserve capacity models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from lendingrisk.core.constants import ZERO
from lendingrisk.core.models.reserve import ReserveSnapshot


class RateMode(Enum):
    """Borrow interest rate modes."""

    STABLE = "stable"
    VARIABLE = "variable"


@dataclass(frozen=True)
class BorrowCapacity:
    """Maximum additional borrow for one reserve."""

    amount: Decimal  # Asset units
    amount_in_usd: Decimal

    @property
    def is_zero(self) -> bool:
        return self.amount == 0


@dataclass(frozen=True)
class BorrowCandidate:
    """A reserve the user may borrow from, with capacity and rates."""

    reserve: ReserveSnapshot
    available_borrows: Decimal
    available_borrows_in_usd: Decimal
    current_borrows: Decimal = ZERO
    current_borrows_usd: Decimal = ZERO

    @property
    def reserve_id(self) -> str:
        return self.reserve.id

    @property
    def total_borrows(self) -> Decimal:
        """Total debt of the reserve across all users."""
        return self.reserve.total_debt

    @property
    def stable_borrow_rate(self) -> Optional[Decimal]:
        return self.borrow_rate(RateMode.STABLE)

    @property
    def variable_borrow_rate(self) -> Optional[Decimal]:
        return self.borrow_rate(RateMode.VARIABLE)

    def borrow_rate(self, mode: RateMode) -> Optional[Decimal]:
        """APY for a rate mode, or None if the reserve does not offer it."""
        if not self.reserve.borrowing_enabled:
            return None
        if mode == RateMode.STABLE:
            if not self.reserve.stable_borrow_rate_enabled:
                return None
            return self.reserve.stable_borrow_apy
        return self.reserve.variable_borrow_apy

    @property
    def rate_modes(self) -> List[RateMode]:
        return [mode for mode in RateMode if self.borrow_rate(mode) is not None]
