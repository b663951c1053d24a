"""Evaluate borrow and withdraw requests into outcomes."""

import logging
from typing import Optional

from lendingrisk.core.models import (
    ActionKind,
    ActionOutcome,
    ActionRequest,
    ReferenceCurrencyConversion,
    ReserveSnapshot,
    UserReservePosition,
)
from lendingrisk.core.errors import MissingUserPosition
from lendingrisk.core.parameters import RiskParameters
from lendingrisk.data.sources.base import AssetClassifier
from lendingrisk.engine.capacity import ReserveCapacityCalculator
from lendingrisk.engine.eligibility import EligibilityFilter
from lendingrisk.engine.health import HealthFactorEngine

logger = logging.getLogger(__name__)


class ActionEvaluator:
    """
    Resolves a requested amount, projects the health factor and decides
    whether the action may be submitted.

    The ``allowed_amount`` of the outcome is the final amount for the
    transaction builder: margins and clamps are already applied.
    """

    def __init__(
        self,
        params: RiskParameters,
        classifier: AssetClassifier,
        capacity: Optional[ReserveCapacityCalculator] = None,
        health: Optional[HealthFactorEngine] = None,
        eligibility: Optional[EligibilityFilter] = None,
    ):
        self.params = params
        self.capacity = capacity or ReserveCapacityCalculator(params)
        self.math = self.capacity.math
        self.health = health or HealthFactorEngine(params, self.math)
        self.eligibility = eligibility or EligibilityFilter(params, classifier, self.capacity)

    def evaluate(
        self,
        request: ActionRequest,
        reserve: ReserveSnapshot,
        position: Optional[UserReservePosition],
        conversion: ReferenceCurrencyConversion,
    ) -> ActionOutcome:
        """
        Evaluate an action request.

        Args:
            request: Borrow or withdraw request
            reserve: Reserve the request targets
            position: User's position in that reserve (required for withdraw)
            conversion: Reference currency to USD conversion

        Returns:
            ActionOutcome

        Raises:
            MissingUserPosition: Withdraw without a position in the reserve
            DivisionByZero: The reserve price is zero
        """
        if request.kind == ActionKind.BORROW:
            outcome = self.evaluate_borrow(request, reserve, conversion)
        elif request.kind == ActionKind.WITHDRAW:
            if position is None:
                raise MissingUserPosition(request.reserve_id)
            outcome = self.evaluate_withdraw(request, reserve, position, conversion)
        else:
            raise ValueError(f"Unknown action kind: {request.kind}")

        if outcome.is_blocked:
            logger.warning(
                f"{request.kind.value} of {outcome.allowed_amount} {reserve.symbol} blocked: "
                f"{outcome.blocking_reason.value}"
            )
        else:
            logger.info(
                f"{request.kind.value} of {outcome.allowed_amount} {reserve.symbol} allowed, "
                f"projected hf={outcome.projected_health_factor}"
            )
        return outcome

    def evaluate_withdraw(
        self,
        request: ActionRequest,
        reserve: ReserveSnapshot,
        position: UserReservePosition,
        conversion: ReferenceCurrencyConversion,
    ) -> ActionOutcome:
        """
        Evaluate a withdraw.

        A maximum request resolves to ``max_withdrawable``, except for users
        without debt, who are not solvency constrained and withdraw their
        full balance. That amount is checked against pool liquidity and is
        blocked when the pool cannot pay it out, rather than silently capped.
        """
        user = request.user
        max_amount = self.capacity.max_withdrawable(reserve, position, user)

        if request.is_max:
            amount = max_amount if user.has_debt else position.underlying_balance
        else:
            amount = request.amount

        collateral_constrained = self.capacity.is_collateral_constrained(reserve, position, user)
        if collateral_constrained:
            projected = self.health.projected_health_factor_after_withdraw(
                user,
                self.capacity.to_reference_currency(amount, reserve),
                reserve.effective_liquidation_threshold(user.emode_category_id),
            )
        else:
            projected = user.health_factor

        blocking_reason = self.eligibility.withdraw_blocking_reason(
            reserve, position, amount, projected, collateral_constrained
        )

        return ActionOutcome(
            kind=ActionKind.WITHDRAW,
            reserve_id=reserve.id,
            allowed_amount=amount,
            allowed_amount_in_usd=self.capacity.amount_in_usd(amount, reserve, conversion),
            projected_health_factor=projected,
            blocking_reason=blocking_reason,
            is_dangerous=self.health.is_dangerous(projected, user.has_debt),
            max_amount=max_amount,
            is_max_request=request.is_max,
        )

    def evaluate_borrow(
        self,
        request: ActionRequest,
        reserve: ReserveSnapshot,
        conversion: ReferenceCurrencyConversion,
    ) -> ActionOutcome:
        """Evaluate a borrow; a maximum request resolves to ``max_additional_borrow``."""
        user = request.user
        capacity = self.capacity.max_additional_borrow(reserve, user, conversion)
        amount = capacity.amount if request.is_max else request.amount

        projected = self.health.projected_health_factor_after_borrow(
            user, self.capacity.to_reference_currency(amount, reserve)
        )
        blocking_reason = self.eligibility.borrow_blocking_reason(reserve, user, amount, capacity, projected)
        has_debt_after = user.has_debt or amount > 0

        return ActionOutcome(
            kind=ActionKind.BORROW,
            reserve_id=reserve.id,
            allowed_amount=amount,
            allowed_amount_in_usd=self.capacity.amount_in_usd(amount, reserve, conversion),
            projected_health_factor=projected,
            blocking_reason=blocking_reason,
            is_dangerous=self.health.is_dangerous(projected, has_debt_after),
            max_amount=capacity.amount,
            is_max_request=request.is_max,
        )
