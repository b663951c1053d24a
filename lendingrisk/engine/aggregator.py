"""Fold per-reserve user balances into aggregate totals."""

import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional

from lendingrisk.core.constants import NO_EMODE_CATEGORY, ZERO
from lendingrisk.core.errors import MissingReserve
from lendingrisk.core.math import DecimalMath
from lendingrisk.core.models import (
    ReferenceCurrencyConversion,
    ReserveSnapshot,
    UserAggregatePosition,
    UserReservePosition,
)
from lendingrisk.core.parameters import RiskParameters
from lendingrisk.engine.health import HealthFactorEngine

logger = logging.getLogger(__name__)


def counts_as_collateral(reserve: ReserveSnapshot, position: UserReservePosition) -> bool:
    """A supply counts as collateral only if both the user and the reserve allow it."""
    return position.usage_as_collateral_enabled_on_user and reserve.usage_as_collateral_enabled


class PositionAggregator:
    """
    Builds a ``UserAggregatePosition`` from reserve positions.

    Weighted averages are computed as sum-then-divide so the result does not
    depend on the order positions are supplied in.
    """

    def __init__(
        self,
        params: RiskParameters,
        math: Optional[DecimalMath] = None,
        health: Optional[HealthFactorEngine] = None,
    ):
        self.params = params
        self.math = math or DecimalMath.from_parameters(params)
        self.health = health or HealthFactorEngine(params, self.math)

    def to_usd(self, amount_in_reference_currency: Decimal, conversion: ReferenceCurrencyConversion) -> Decimal:
        """Convert a reference currency value to USD (unrounded)."""
        value = self.math.mul(amount_in_reference_currency, conversion.market_reference_price_in_usd)
        return self.math.shift(value, -conversion.usd_decimals_exponent)

    def aggregate(
        self,
        reserves: Iterable[ReserveSnapshot],
        positions: Iterable[UserReservePosition],
        conversion: ReferenceCurrencyConversion,
        emode_category_id: int = NO_EMODE_CATEGORY,
    ) -> UserAggregatePosition:
        """
        Aggregate a user's positions.

        Args:
            reserves: Reserve snapshots the positions refer to
            positions: User positions, one per reserve
            conversion: Reference currency to USD conversion
            emode_category_id: User's active e-mode category (0 = none)

        Returns:
            UserAggregatePosition with totals, weighted thresholds and health factor

        Raises:
            MissingReserve: If a position refers to an unknown reserve
        """
        math = self.math
        reserves_by_id: Dict[str, ReserveSnapshot] = {reserve.id: reserve for reserve in reserves}

        total_collateral = ZERO
        total_borrows = ZERO
        weighted_threshold = ZERO
        weighted_ltv = ZERO
        is_in_isolation_mode = False

        for position in positions:
            reserve = reserves_by_id.get(position.reserve_id)
            if reserve is None:
                raise MissingReserve(position.reserve_id)

            price = reserve.price_in_reference_currency

            if position.total_borrows > 0:
                total_borrows = math.add(total_borrows, math.mul(position.total_borrows, price))

            if position.underlying_balance > 0 and counts_as_collateral(reserve, position):
                value = math.mul(position.underlying_balance, price)
                total_collateral = math.add(total_collateral, value)
                weighted_threshold = math.add(
                    weighted_threshold,
                    math.mul(value, reserve.effective_liquidation_threshold(emode_category_id)),
                )
                weighted_ltv = math.add(
                    weighted_ltv,
                    math.mul(value, reserve.effective_loan_to_value(emode_category_id)),
                )
                if reserve.is_isolated_collateral:
                    is_in_isolation_mode = True

        if total_collateral > 0:
            current_threshold = math.div(weighted_threshold, total_collateral)
            current_ltv = math.div(weighted_ltv, total_collateral)
        else:
            current_threshold = ZERO
            current_ltv = ZERO

        available_borrows = ZERO
        if current_ltv > 0:
            available_borrows = math.max(
                math.sub(math.mul(total_collateral, current_ltv), total_borrows),
                ZERO,
            )

        health_factor = self.health.health_factor(total_collateral, total_borrows, current_threshold)

        places = self.params.usd_precision_places
        aggregate = UserAggregatePosition(
            total_collateral_in_reference_currency=total_collateral,
            total_borrows_in_reference_currency=total_borrows,
            available_borrows_in_reference_currency=available_borrows,
            current_liquidation_threshold=current_threshold,
            health_factor=health_factor,
            is_in_isolation_mode=is_in_isolation_mode,
            emode_category_id=emode_category_id,
            current_loan_to_value=current_ltv,
            total_collateral_usd=math.round_half_even(self.to_usd(total_collateral, conversion), places),
            total_borrows_usd=math.round_half_even(self.to_usd(total_borrows, conversion), places),
        )

        logger.debug(
            f"Aggregated position: collateral={total_collateral}, borrows={total_borrows}, "
            f"threshold={current_threshold}, hf={health_factor}"
        )
        return aggregate
