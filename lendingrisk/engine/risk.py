"""Risk engine facade."""

import logging
from decimal import Decimal
from typing import List, Optional

from lendingrisk.core.math import DecimalMath
from lendingrisk.core.models import (
    ActionOutcome,
    ActionRequest,
    BorrowCandidate,
    BorrowCapacity,
    PoolSnapshot,
    UserAggregatePosition,
)
from lendingrisk.core.parameters import RiskParameters
from lendingrisk.data.sources.base import AssetClassifier
from lendingrisk.engine.actions import ActionEvaluator
from lendingrisk.engine.aggregator import PositionAggregator
from lendingrisk.engine.capacity import ReserveCapacityCalculator
from lendingrisk.engine.eligibility import EligibilityFilter
from lendingrisk.engine.health import HealthFactorEngine, RiskBand
from lendingrisk.protocols.aave.assets import StaticAssetClassifier

logger = logging.getLogger(__name__)


class RiskEngine:
    """
    Entry point wiring the calculators together for one parameter set.

    Every method is a pure function of its arguments; one engine may be
    shared by concurrent callers.
    """

    def __init__(
        self,
        params: RiskParameters,
        classifier: Optional[AssetClassifier] = None,
    ):
        self.params = params
        self.classifier = classifier or StaticAssetClassifier()
        self.math = DecimalMath.from_parameters(params)
        self.health = HealthFactorEngine(params, self.math)
        self.aggregator = PositionAggregator(params, self.math, self.health)
        self.capacity = ReserveCapacityCalculator(params, self.math)
        self.eligibility = EligibilityFilter(params, self.classifier, self.capacity)
        self.actions = ActionEvaluator(
            params,
            self.classifier,
            capacity=self.capacity,
            health=self.health,
            eligibility=self.eligibility,
        )

    @classmethod
    def from_settings(cls, settings=None) -> "RiskEngine":
        """Build an engine from application settings."""
        from config.settings import get_settings

        settings = settings or get_settings()
        return cls(
            settings.risk_parameters(),
            StaticAssetClassifier(settings.stable_asset_symbols),
        )

    def aggregate(self, snapshot: PoolSnapshot) -> UserAggregatePosition:
        """Aggregate the user positions of a snapshot."""
        return self.aggregator.aggregate(
            snapshot.reserves,
            snapshot.positions,
            snapshot.conversion,
            snapshot.user_emode_category_id,
        )

    def max_additional_borrow(
        self,
        snapshot: PoolSnapshot,
        reserve_id: str,
        user: Optional[UserAggregatePosition] = None,
    ) -> BorrowCapacity:
        if user is None:
            user = self.aggregate(snapshot)
        return self.capacity.max_additional_borrow(snapshot.reserve(reserve_id), user, snapshot.conversion)

    def max_withdrawable(
        self,
        snapshot: PoolSnapshot,
        reserve_id: str,
        user: Optional[UserAggregatePosition] = None,
    ) -> Decimal:
        if user is None:
            user = self.aggregate(snapshot)
        return self.capacity.max_withdrawable(
            snapshot.reserve(reserve_id),
            snapshot.position(reserve_id),
            user,
        )

    def borrow_candidates(
        self,
        snapshot: PoolSnapshot,
        user: Optional[UserAggregatePosition] = None,
    ) -> List[BorrowCandidate]:
        """Reserves the user may borrow, excluding assets already borrowed."""
        if user is None:
            user = self.aggregate(snapshot)
        return self.eligibility.borrow_candidates(
            snapshot.reserves,
            user,
            snapshot.conversion,
            borrowed_assets=snapshot.borrowed_assets,
            positions=snapshot.positions,
        )

    def risk_band(self, user: UserAggregatePosition) -> RiskBand:
        return self.health.classify(user.health_factor)

    def evaluate(self, request: ActionRequest, snapshot: PoolSnapshot) -> ActionOutcome:
        """
        Evaluate an action against a snapshot.

        Raises:
            MissingReserve: The request refers to a reserve absent from the snapshot
            MissingUserPosition: Withdraw from a reserve the user holds nothing in
        """
        reserve = snapshot.reserve(request.reserve_id)
        position = snapshot.find_position(request.reserve_id)
        logger.debug(f"Evaluating {request.kind.value} {request.amount!r} on {reserve.symbol}")
        return self.actions.evaluate(request, reserve, position, snapshot.conversion)
