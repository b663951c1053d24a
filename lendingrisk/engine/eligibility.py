"""Per-reserve borrow eligibility and action blocking rules."""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from lendingrisk.core.constants import ZERO
from lendingrisk.core.models import (
    BlockingReason,
    BorrowCandidate,
    BorrowCapacity,
    CollateralMode,
    ReferenceCurrencyConversion,
    ReserveSnapshot,
    UserAggregatePosition,
    UserReservePosition,
)
from lendingrisk.core.parameters import RiskParameters
from lendingrisk.data.sources.base import AssetClass, AssetClassifier
from lendingrisk.engine.capacity import ReserveCapacityCalculator

logger = logging.getLogger(__name__)


class EligibilityFilter:
    """
    Decides whether borrow and withdraw actions are permitted.

    Blocking reasons are returned, never raised: they are expected decision
    points for the user, not engine failures.
    """

    def __init__(
        self,
        params: RiskParameters,
        classifier: AssetClassifier,
        capacity: Optional[ReserveCapacityCalculator] = None,
    ):
        self.params = params
        self.classifier = classifier
        self.capacity = capacity or ReserveCapacityCalculator(params)

    # ========== BORROW ==========

    def collateral_mode_allows_borrow(
        self,
        reserve: ReserveSnapshot,
        user: UserAggregatePosition,
    ) -> bool:
        """Borrow rule for the user's collateral mode."""
        mode = user.collateral_mode
        if mode == CollateralMode.STANDARD:
            return reserve.borrowing_enabled and reserve.is_active
        if mode == CollateralMode.ISOLATED:
            return (
                reserve.borrowable_in_isolation
                and self.classifier.classify(reserve.symbol) == AssetClass.STABLE
            )
        raise ValueError(f"Unknown collateral mode: {mode}")

    @staticmethod
    def emode_allows_borrow(reserve: ReserveSnapshot, user: UserAggregatePosition) -> bool:
        """Users in e-mode may only borrow assets of their own category."""
        if not user.has_emode:
            return True
        return reserve.emode_category_id == user.emode_category_id

    def is_borrowable(
        self,
        reserve: ReserveSnapshot,
        user: UserAggregatePosition,
        available_borrows_in_usd: Decimal,
        borrowed_assets: Iterable[str] = (),
    ) -> bool:
        """
        Check if a reserve can be offered for borrowing.

        Args:
            reserve: Candidate reserve
            user: User's aggregate position
            available_borrows_in_usd: User's borrow capacity in this reserve (USD)
            borrowed_assets: Underlying assets the user already borrows

        Returns:
            True if every borrow condition holds
        """
        already_borrowed = {asset.lower() for asset in borrowed_assets}
        if reserve.underlying_asset.lower() in already_borrowed:
            return False
        if available_borrows_in_usd == 0 or reserve.total_liquidity_usd == 0:
            return False
        return self.collateral_mode_allows_borrow(reserve, user) and self.emode_allows_borrow(reserve, user)

    def borrow_candidates(
        self,
        reserves: Iterable[ReserveSnapshot],
        user: UserAggregatePosition,
        conversion: ReferenceCurrencyConversion,
        borrowed_assets: Iterable[str] = (),
        positions: Iterable[UserReservePosition] = (),
    ) -> List[BorrowCandidate]:
        """
        Build the list of reserves the user may borrow, in input order.

        Args:
            reserves: All pool reserves
            user: User's aggregate position
            conversion: Reference currency to USD conversion
            borrowed_assets: Underlying assets the user already borrows
            positions: User positions, used to report current borrows

        Returns:
            Eligible BorrowCandidate entries
        """
        borrowed_assets = tuple(borrowed_assets)
        positions_by_reserve = {position.reserve_id: position for position in positions}

        candidates = []
        for reserve in reserves:
            capacity = self.capacity.max_additional_borrow(reserve, user, conversion)
            if not self.is_borrowable(reserve, user, capacity.amount_in_usd, borrowed_assets):
                logger.debug(f"{reserve.symbol}: not borrowable")
                continue

            position = positions_by_reserve.get(reserve.id)
            candidates.append(
                BorrowCandidate(
                    reserve=reserve,
                    available_borrows=capacity.amount,
                    available_borrows_in_usd=capacity.amount_in_usd,
                    current_borrows=position.total_borrows if position else ZERO,
                    current_borrows_usd=position.total_borrows_usd if position else ZERO,
                )
            )

        logger.debug(f"{len(candidates)} borrowable reserves")
        return candidates

    def borrow_blocking_reason(
        self,
        reserve: ReserveSnapshot,
        user: UserAggregatePosition,
        amount: Decimal,
        capacity: BorrowCapacity,
        projected_health_factor: Decimal,
    ) -> Optional[BlockingReason]:
        """
        First matching reason a borrow cannot proceed, or None.

        Order: reserve unavailable, health factor, pool liquidity, capacity.
        """
        if reserve.is_frozen or not (
            self.collateral_mode_allows_borrow(reserve, user) and self.emode_allows_borrow(reserve, user)
        ):
            return BlockingReason.BORROWING_UNAVAILABLE
        if projected_health_factor < self.params.liquidation_health_factor:
            return BlockingReason.INSUFFICIENT_HEALTH_FACTOR
        if reserve.available_liquidity == 0 or amount > reserve.available_liquidity:
            return BlockingReason.INSUFFICIENT_POOL_LIQUIDITY
        if capacity.amount == 0 or amount > capacity.amount:
            return BlockingReason.INSUFFICIENT_BORROW_CAPACITY
        return None

    # ========== WITHDRAW ==========

    def withdraw_blocking_reason(
        self,
        reserve: ReserveSnapshot,
        position: UserReservePosition,
        amount: Decimal,
        projected_health_factor: Decimal,
        collateral_constrained: bool,
    ) -> Optional[BlockingReason]:
        """
        First matching reason a withdraw cannot proceed, or None.

        Args:
            reserve: Reserve withdrawn from
            position: User's position in the reserve
            amount: Resolved withdraw amount
            projected_health_factor: Health factor after the withdraw
            collateral_constrained: Position backs debt as collateral

        Returns:
            BlockingReason or None
        """
        if collateral_constrained and projected_health_factor < self.params.liquidation_health_factor:
            return BlockingReason.INSUFFICIENT_HEALTH_FACTOR
        balance = position.underlying_balance
        if balance == 0 or balance < amount:
            return BlockingReason.INSUFFICIENT_USER_BALANCE
        unborrowed = reserve.unborrowed_liquidity
        if unborrowed == 0 or amount > unborrowed:
            return BlockingReason.INSUFFICIENT_POOL_LIQUIDITY
        return None
