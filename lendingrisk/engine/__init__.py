"""Risk and capacity calculation engine components."""

from .health import HealthFactorEngine, RiskBand
from .aggregator import PositionAggregator
from .capacity import ReserveCapacityCalculator
from .eligibility import EligibilityFilter
from .actions import ActionEvaluator
from .risk import RiskEngine

__all__ = [
    "HealthFactorEngine",
    "RiskBand",
    "PositionAggregator",
    "ReserveCapacityCalculator",
    "EligibilityFilter",
    "ActionEvaluator",
    "RiskEngine",
]
