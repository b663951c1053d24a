"""Reserve snapshot and reference currency models."""

from dataclasses import dataclass
from decimal import Decimal

from lendingrisk.core.constants import NO_EMODE_CATEGORY, USD_DECIMALS, ZERO
from lendingrisk.core.errors import InvalidSnapshot


def _check_fraction(name: str, value: Decimal) -> None:
    if not ZERO <= value <= Decimal("1"):
        raise InvalidSnapshot(f"{name} must be a fraction in [0, 1], got {value}")


@dataclass(frozen=True)
class ReserveSnapshot:
    """
    Immutable view of one lending pool reserve.

    Amounts are in the asset's native units (already scaled by ``decimals``),
    prices in the market reference currency, thresholds as fractions.
    """

    id: str
    underlying_asset: str  # Token address
    symbol: str
    price_in_reference_currency: Decimal
    decimals: int

    # Liquidity
    available_liquidity: Decimal = ZERO
    unborrowed_liquidity: Decimal = ZERO
    total_debt: Decimal = ZERO
    total_liquidity_usd: Decimal = ZERO

    # Status flags
    is_active: bool = True
    is_frozen: bool = False
    borrowing_enabled: bool = True
    borrowable_in_isolation: bool = False
    usage_as_collateral_enabled: bool = True
    stable_borrow_rate_enabled: bool = False

    # Rates
    stable_borrow_apy: Decimal = ZERO
    variable_borrow_apy: Decimal = ZERO

    # Risk parameters
    loan_to_value: Decimal = ZERO
    liquidation_threshold: Decimal = ZERO
    debt_ceiling: Decimal = ZERO  # Nonzero marks an isolated collateral asset

    # E-mode
    emode_category_id: int = NO_EMODE_CATEGORY
    emode_loan_to_value: Decimal = ZERO
    emode_liquidation_threshold: Decimal = ZERO

    def __post_init__(self):
        if self.decimals < 0:
            raise InvalidSnapshot(f"Reserve {self.id}: decimals must be >= 0, got {self.decimals}")
        if self.price_in_reference_currency < 0:
            raise InvalidSnapshot(f"Reserve {self.id}: negative price {self.price_in_reference_currency}")
        if self.available_liquidity < 0:
            raise InvalidSnapshot(f"Reserve {self.id}: negative available liquidity")
        if self.unborrowed_liquidity < 0:
            raise InvalidSnapshot(f"Reserve {self.id}: negative unborrowed liquidity")
        _check_fraction("loan_to_value", self.loan_to_value)
        _check_fraction("liquidation_threshold", self.liquidation_threshold)
        _check_fraction("emode_loan_to_value", self.emode_loan_to_value)
        _check_fraction("emode_liquidation_threshold", self.emode_liquidation_threshold)

    def in_emode_category(self, emode_category_id: int) -> bool:
        """Check if a user's active e-mode category applies to this reserve."""
        return emode_category_id != NO_EMODE_CATEGORY and emode_category_id == self.emode_category_id

    def effective_liquidation_threshold(self, emode_category_id: int) -> Decimal:
        """Liquidation threshold seen by a user in the given e-mode category."""
        if self.in_emode_category(emode_category_id):
            return self.emode_liquidation_threshold
        return self.liquidation_threshold

    def effective_loan_to_value(self, emode_category_id: int) -> Decimal:
        """Max LTV seen by a user in the given e-mode category."""
        if self.in_emode_category(emode_category_id):
            return self.emode_loan_to_value
        return self.loan_to_value

    @property
    def is_isolated_collateral(self) -> bool:
        """Supplying this asset as collateral puts the user in isolation mode."""
        return self.debt_ceiling != 0


@dataclass(frozen=True)
class ReferenceCurrencyConversion:
    """Price of the market reference currency in USD for one pool snapshot."""

    market_reference_price_in_usd: Decimal  # Fixed point, usd_decimals_exponent decimals
    usd_decimals_exponent: int = USD_DECIMALS

    def __post_init__(self):
        if self.market_reference_price_in_usd <= 0:
            raise InvalidSnapshot(
                f"market_reference_price_in_usd must be > 0, got {self.market_reference_price_in_usd}"
            )
