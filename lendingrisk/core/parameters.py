"""Explicit precision and tolerance configuration for the risk engine."""

from dataclasses import dataclass
from decimal import Decimal

from lendingrisk.core.constants import (
    BORROW_SAFETY_MARGIN,
    DANGEROUS_HEALTH_FACTOR,
    DEFAULT_DECIMAL_PRECISION,
    LIQUIDATION_HEALTH_FACTOR,
    THRESHOLD_PRECISION_PLACES,
    USD_PRECISION_PLACES,
    WITHDRAW_SAFETY_MARGIN,
    WITHDRAW_THRESHOLD_PADDING,
)


@dataclass(frozen=True)
class RiskParameters:
    """
    Protocol tolerance parameters passed to every engine component.

    The margins absorb price/interest drift and rounding between the moment
    a capacity is estimated and the moment the settlement layer executes it.
    They must match what the settlement layer actually tolerates, so they are
    configuration rather than hard-coded constants.
    """

    decimal_precision: int = DEFAULT_DECIMAL_PRECISION

    # Borrow headroom multiplier when the user already carries debt
    borrow_safety_margin: Decimal = BORROW_SAFETY_MARGIN

    # Withdraw headroom: excess / (threshold + padding) * margin
    withdraw_threshold_padding: Decimal = WITHDRAW_THRESHOLD_PADDING
    withdraw_safety_margin: Decimal = WITHDRAW_SAFETY_MARGIN

    # Health factor bands
    liquidation_health_factor: Decimal = LIQUIDATION_HEALTH_FACTOR
    dangerous_health_factor: Decimal = DANGEROUS_HEALTH_FACTOR

    # Rounding
    threshold_precision_places: int = THRESHOLD_PRECISION_PLACES
    usd_precision_places: int = USD_PRECISION_PLACES

    def __post_init__(self):
        if self.decimal_precision < 28:
            raise ValueError(f"decimal_precision too low: {self.decimal_precision}")
        for name in ("borrow_safety_margin", "withdraw_safety_margin"):
            value = getattr(self, name)
            if not Decimal("0") < value <= Decimal("1"):
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        if self.withdraw_threshold_padding < 0:
            raise ValueError(
                f"withdraw_threshold_padding must be >= 0, got {self.withdraw_threshold_padding}"
            )
        if self.dangerous_health_factor < self.liquidation_health_factor:
            raise ValueError("dangerous_health_factor must not be below liquidation_health_factor")
        if self.threshold_precision_places < 0 or self.usd_precision_places < 0:
            raise ValueError("Precision places must be non-negative")


DEFAULT_RISK_PARAMETERS = RiskParameters()
