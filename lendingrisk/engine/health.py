"""Health factor calculations."""

import logging
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from lendingrisk.core.constants import HEALTH_FACTOR_INFINITE, ZERO
from lendingrisk.core.math import DecimalMath
from lendingrisk.core.models import UserAggregatePosition
from lendingrisk.core.parameters import RiskParameters

logger = logging.getLogger(__name__)


class RiskBand(Enum):
    """Liquidation risk classification of a health factor."""

    NO_DEBT = "no_debt"
    HEALTHY = "healthy"
    DANGEROUS = "dangerous"  # Above liquidation but inside the warning band
    LIQUIDATABLE = "liquidatable"


def is_infinite(health_factor: Decimal) -> bool:
    """Check for the no-debt sentinel."""
    return health_factor.is_infinite()


class HealthFactorEngine:
    """
    Calculator for current and projected health factors.

    HF = (Collateral * Liquidation Threshold) / Debt

    All values are in the market reference currency. A position with no debt
    has the ``HEALTH_FACTOR_INFINITE`` sentinel, which compares greater than
    any finite value and is never used as a divisor.
    """

    def __init__(self, params: RiskParameters, math: Optional[DecimalMath] = None):
        self.params = params
        self.math = math or DecimalMath.from_parameters(params)

    def health_factor(
        self,
        total_collateral: Decimal,
        total_borrows: Decimal,
        liquidation_threshold: Decimal,
    ) -> Decimal:
        """
        Calculate health factor.

        Args:
            total_collateral: Collateral value in reference currency
            total_borrows: Debt value in reference currency
            liquidation_threshold: Weighted liquidation threshold (fraction)

        Returns:
            Health factor (< 1.0 means liquidation), infinite without debt
        """
        if total_borrows == 0:
            return HEALTH_FACTOR_INFINITE

        return self.math.div(
            self.math.mul(total_collateral, liquidation_threshold),
            total_borrows,
            "health factor",
        )

    def position_after_withdraw(
        self,
        user: UserAggregatePosition,
        amount_in_reference_currency: Decimal,
        reserve_threshold: Decimal,
    ) -> Tuple[Decimal, Decimal]:
        """
        Collateral and weighted liquidation threshold after removing collateral.

        The withdrawn reserve's contribution is removed from the weighted sum:
        threshold' = (C * LT - amount * LT_reserve) / (C - amount)

        The threshold is truncated to ``threshold_precision_places`` digits,
        matching the precision the settlement layer works with.

        Returns:
            Tuple of (collateral_after, liquidation_threshold_after)
        """
        math = self.math
        collateral_after = math.sub(user.total_collateral_in_reference_currency, amount_in_reference_currency)
        if collateral_after <= 0:
            return ZERO, ZERO

        weighted = math.sub(
            math.mul(user.total_collateral_in_reference_currency, user.current_liquidation_threshold),
            math.mul(amount_in_reference_currency, reserve_threshold),
        )
        threshold_after = math.round_down(
            math.div(weighted, collateral_after, "liquidation threshold after withdraw"),
            self.params.threshold_precision_places,
        )
        return collateral_after, threshold_after

    def projected_health_factor_after_withdraw(
        self,
        user: UserAggregatePosition,
        amount_in_reference_currency: Decimal,
        reserve_threshold: Decimal,
    ) -> Decimal:
        """
        Health factor after withdrawing collateral.

        Args:
            user: Current aggregate position
            amount_in_reference_currency: Withdrawn collateral value
            reserve_threshold: Effective liquidation threshold of the withdrawn reserve

        Returns:
            Projected health factor
        """
        collateral_after, threshold_after = self.position_after_withdraw(
            user, amount_in_reference_currency, reserve_threshold
        )
        projected = self.health_factor(
            collateral_after,
            user.total_borrows_in_reference_currency,
            threshold_after,
        )
        logger.debug(
            f"HF after withdraw of {amount_in_reference_currency}: "
            f"collateral={collateral_after}, threshold={threshold_after}, hf={projected}"
        )
        return projected

    def projected_health_factor_after_borrow(
        self,
        user: UserAggregatePosition,
        amount_in_reference_currency: Decimal,
    ) -> Decimal:
        """Health factor after adding debt; collateral and threshold unchanged."""
        borrows_after = self.math.add(user.total_borrows_in_reference_currency, amount_in_reference_currency)
        return self.health_factor(
            user.total_collateral_in_reference_currency,
            borrows_after,
            user.current_liquidation_threshold,
        )

    def is_liquidatable(self, health_factor: Decimal) -> bool:
        return health_factor < self.params.liquidation_health_factor

    def is_dangerous(self, health_factor: Decimal, has_debt: bool) -> bool:
        """Near-liquidation warning: debt is nonzero and HF <= dangerous threshold."""
        return has_debt and health_factor <= self.params.dangerous_health_factor

    def classify(self, health_factor: Decimal) -> RiskBand:
        if is_infinite(health_factor):
            return RiskBand.NO_DEBT
        if self.is_liquidatable(health_factor):
            return RiskBand.LIQUIDATABLE
        if health_factor <= self.params.dangerous_health_factor:
            return RiskBand.DANGEROUS
        return RiskBand.HEALTHY
