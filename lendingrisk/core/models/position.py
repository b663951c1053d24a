"""User position models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from lendingrisk.core.constants import HEALTH_FACTOR_INFINITE, NO_EMODE_CATEGORY, ZERO
from lendingrisk.core.errors import InvalidSnapshot


class CollateralMode(Enum):
    """How a user's collateral restricts what they may borrow."""

    STANDARD = "standard"
    ISOLATED = "isolated"  # Collateral is a high-risk isolated asset


@dataclass(frozen=True)
class UserReservePosition:
    """A user's balances in a single reserve."""

    reserve_id: str

    # Supply side (asset units)
    underlying_balance: Decimal = ZERO
    usage_as_collateral_enabled_on_user: bool = False

    # Borrow side
    total_borrows: Decimal = ZERO
    total_borrows_usd: Decimal = ZERO

    def __post_init__(self):
        if self.underlying_balance < 0:
            raise InvalidSnapshot(f"Position {self.reserve_id}: negative underlying balance")
        if self.total_borrows < 0:
            raise InvalidSnapshot(f"Position {self.reserve_id}: negative total borrows")

    @property
    def is_supplier(self) -> bool:
        return self.underlying_balance > 0

    @property
    def is_borrower(self) -> bool:
        return self.total_borrows > 0


@dataclass(frozen=True)
class UserAggregatePosition:
    """
    Totals across all of a user's reserve positions.

    Values are in the market reference currency unless suffixed ``_usd``.
    Always derived by ``PositionAggregator``, never authored by hand outside
    of tests.
    """

    total_collateral_in_reference_currency: Decimal
    total_borrows_in_reference_currency: Decimal
    available_borrows_in_reference_currency: Decimal
    current_liquidation_threshold: Decimal
    health_factor: Decimal = HEALTH_FACTOR_INFINITE
    is_in_isolation_mode: bool = False
    emode_category_id: int = NO_EMODE_CATEGORY

    current_loan_to_value: Decimal = ZERO
    total_collateral_usd: Decimal = ZERO
    total_borrows_usd: Decimal = ZERO

    @property
    def has_debt(self) -> bool:
        return self.total_borrows_in_reference_currency != 0

    @property
    def has_emode(self) -> bool:
        return self.emode_category_id != NO_EMODE_CATEGORY

    @property
    def collateral_mode(self) -> CollateralMode:
        return CollateralMode.ISOLATED if self.is_in_isolation_mode else CollateralMode.STANDARD
