"""Risk and capacity calculation engine for collateralized lending pools."""

from lendingrisk.core import (
    DEFAULT_RISK_PARAMETERS,
    HEALTH_FACTOR_INFINITE,
    DecimalMath,
    DivisionByZero,
    InvalidSnapshot,
    MissingReserve,
    MissingUserPosition,
    RiskEngineError,
    RiskParameters,
)
from lendingrisk.core.models import (
    MAX_AMOUNT,
    ActionKind,
    ActionOutcome,
    ActionRequest,
    BlockingReason,
    BorrowCandidate,
    BorrowCapacity,
    PoolSnapshot,
    ReferenceCurrencyConversion,
    ReserveSnapshot,
    UserAggregatePosition,
    UserReservePosition,
)
from lendingrisk.engine import RiskBand, RiskEngine

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_RISK_PARAMETERS",
    "HEALTH_FACTOR_INFINITE",
    "DecimalMath",
    "DivisionByZero",
    "InvalidSnapshot",
    "MissingReserve",
    "MissingUserPosition",
    "RiskEngineError",
    "RiskParameters",
    "MAX_AMOUNT",
    "ActionKind",
    "ActionOutcome",
    "ActionRequest",
    "BlockingReason",
    "BorrowCandidate",
    "BorrowCapacity",
    "PoolSnapshot",
    "ReferenceCurrencyConversion",
    "ReserveSnapshot",
    "UserAggregatePosition",
    "UserReservePosition",
    "RiskBand",
    "RiskEngine",
]
