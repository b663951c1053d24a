"""Core data models for the lending risk engine."""

from .reserve import ReserveSnapshot, ReferenceCurrencyConversion
from .position import CollateralMode, UserReservePosition, UserAggregatePosition
from .action import (
    ActionKind,
    ActionOutcome,
    ActionRequest,
    BlockingReason,
    MAX_AMOUNT,
    MaxAmount,
)
from .capacity import BorrowCandidate, BorrowCapacity, RateMode
from .snapshot import PoolSnapshot

__all__ = [
    "ReserveSnapshot",
    "ReferenceCurrencyConversion",
    "CollateralMode",
    "UserReservePosition",
    "UserAggregatePosition",
    "ActionKind",
    "ActionOutcome",
    "ActionRequest",
    "BlockingReason",
    "MAX_AMOUNT",
    "MaxAmount",
    "BorrowCandidate",
    "BorrowCapacity",
    "RateMode",
    "PoolSnapshot",
]
