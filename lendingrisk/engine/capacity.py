"""Per-reserve borrow and withdraw capacity."""

import logging
from decimal import Decimal
from typing import Optional

from lendingrisk.core.constants import ONE, ZERO
from lendingrisk.core.math import DecimalMath
from lendingrisk.core.models import (
    BorrowCapacity,
    ReferenceCurrencyConversion,
    ReserveSnapshot,
    UserAggregatePosition,
    UserReservePosition,
)
from lendingrisk.core.parameters import RiskParameters
from lendingrisk.engine.aggregator import counts_as_collateral

logger = logging.getLogger(__name__)


class ReserveCapacityCalculator:
    """
    Calculator for how much a user may still borrow or withdraw.

    Results are rounded down to the asset's precision: the settlement layer
    tolerates an estimate that is too low, never one that is too high.
    """

    def __init__(self, params: RiskParameters, math: Optional[DecimalMath] = None):
        self.params = params
        self.math = math or DecimalMath.from_parameters(params)

    def to_reference_currency(self, amount: Decimal, reserve: ReserveSnapshot) -> Decimal:
        return self.math.mul(amount, reserve.price_in_reference_currency)

    def from_reference_currency(self, value: Decimal, reserve: ReserveSnapshot) -> Decimal:
        """
        Convert a reference currency value into asset units.

        Raises:
            DivisionByZero: If the reserve price is zero
        """
        return self.math.div(value, reserve.price_in_reference_currency, f"{reserve.symbol} price conversion")

    def amount_in_usd(
        self,
        amount: Decimal,
        reserve: ReserveSnapshot,
        conversion: ReferenceCurrencyConversion,
    ) -> Decimal:
        """Asset amount in USD, rounded down to ``usd_precision_places``."""
        math = self.math
        value = math.mul(
            math.mul(amount, reserve.price_in_reference_currency),
            conversion.market_reference_price_in_usd,
        )
        value = math.shift(value, -conversion.usd_decimals_exponent)
        return math.round_down(value, self.params.usd_precision_places)

    def max_additional_borrow(
        self,
        reserve: ReserveSnapshot,
        user: UserAggregatePosition,
        conversion: ReferenceCurrencyConversion,
    ) -> BorrowCapacity:
        """
        Maximum additional amount of ``reserve`` the user may borrow.

        available = min(headroom / price * margin, available_liquidity)

        The margin is ``borrow_safety_margin`` when the user already has debt
        and 1 otherwise.

        Args:
            reserve: Reserve to borrow from
            user: User's aggregate position
            conversion: Reference currency to USD conversion

        Returns:
            BorrowCapacity in asset units and USD
        """
        math = self.math
        headroom = user.available_borrows_in_reference_currency
        if headroom <= 0:
            return BorrowCapacity(amount=ZERO, amount_in_usd=ZERO)

        margin = self.params.borrow_safety_margin if user.has_debt else ONE
        amount = math.mul(self.from_reference_currency(headroom, reserve), margin)
        amount = math.min(amount, reserve.available_liquidity)
        amount = math.round_down(amount, reserve.decimals)

        capacity = BorrowCapacity(
            amount=amount,
            amount_in_usd=self.amount_in_usd(amount, reserve, conversion),
        )
        logger.debug(
            f"{reserve.symbol}: max borrow {capacity.amount} ({capacity.amount_in_usd} USD), "
            f"margin={margin}, liquidity={reserve.available_liquidity}"
        )
        return capacity

    def collateral_headroom(
        self,
        reserve: ReserveSnapshot,
        user: UserAggregatePosition,
    ) -> Decimal:
        """
        Collateral value (reference currency) removable before liquidation.

        headroom = (HF - 1) * debt / (LT + padding) * margin

        The padding and margin absorb rounding in the settlement layer.
        Returns 0 when the position is already at or below the boundary.
        """
        math = self.math
        excess_health = math.sub(user.health_factor, self.params.liquidation_health_factor)
        if excess_health <= 0:
            return ZERO

        threshold = reserve.effective_liquidation_threshold(user.emode_category_id)
        headroom = math.div(
            math.mul(excess_health, user.total_borrows_in_reference_currency),
            math.add(threshold, self.params.withdraw_threshold_padding),
            "withdraw headroom",
        )
        return math.mul(headroom, self.params.withdraw_safety_margin)

    def is_collateral_constrained(
        self,
        reserve: ReserveSnapshot,
        position: UserReservePosition,
        user: UserAggregatePosition,
    ) -> bool:
        """Withdrawing from this position can lower the user's health factor."""
        return counts_as_collateral(reserve, position) and user.has_debt

    def max_withdrawable(
        self,
        reserve: ReserveSnapshot,
        position: UserReservePosition,
        user: UserAggregatePosition,
    ) -> Decimal:
        """
        Maximum amount of ``reserve`` the user may withdraw.

        Capped by the user's balance and the pool's unborrowed liquidity, and
        for collateral backing debt, by the collateral headroom.

        Args:
            reserve: Reserve to withdraw from
            position: User's position in that reserve
            user: User's aggregate position

        Returns:
            Withdrawable amount in asset units
        """
        math = self.math
        base_cap = math.min(position.underlying_balance, reserve.unborrowed_liquidity)

        if not self.is_collateral_constrained(reserve, position, user):
            return math.round_down(base_cap, reserve.decimals)

        headroom = self.from_reference_currency(self.collateral_headroom(reserve, user), reserve)
        amount = math.round_down(math.min(base_cap, headroom), reserve.decimals)

        logger.debug(
            f"{reserve.symbol}: max withdraw {amount} (balance={position.underlying_balance}, "
            f"unborrowed={reserve.unborrowed_liquidity}, hf={user.health_factor})"
        )
        return amount
