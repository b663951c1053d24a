"""Action request and outcome models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from lendingrisk.core.models.position import UserAggregatePosition


class ActionKind(Enum):
    """User actions the engine evaluates."""

    BORROW = "borrow"
    WITHDRAW = "withdraw"


class BlockingReason(Enum):
    """Expected reasons an action cannot be submitted."""

    INSUFFICIENT_HEALTH_FACTOR = "insufficient_health_factor"
    INSUFFICIENT_USER_BALANCE = "insufficient_user_balance"
    INSUFFICIENT_POOL_LIQUIDITY = "insufficient_pool_liquidity"
    BORROWING_UNAVAILABLE = "borrowing_unavailable"
    INSUFFICIENT_BORROW_CAPACITY = "insufficient_borrow_capacity"


class MaxAmount:
    """Sentinel requesting the maximum available amount."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MAX_AMOUNT"


MAX_AMOUNT = MaxAmount()

RequestedAmount = Union[Decimal, MaxAmount]


@dataclass(frozen=True)
class ActionRequest:
    """A borrow or withdraw the user intends to submit."""

    kind: ActionKind
    reserve_id: str
    amount: RequestedAmount
    user: UserAggregatePosition

    def __post_init__(self):
        if not self.is_max and self.amount < 0:
            raise ValueError(f"Requested amount must be >= 0, got {self.amount}")

    @property
    def is_max(self) -> bool:
        return self.amount is MAX_AMOUNT


@dataclass(frozen=True)
class ActionOutcome:
    """Result of evaluating an ``ActionRequest``."""

    kind: ActionKind
    reserve_id: str
    allowed_amount: Decimal  # Resolved amount to hand to the transaction builder
    allowed_amount_in_usd: Decimal
    projected_health_factor: Decimal
    blocking_reason: Optional[BlockingReason] = None
    is_dangerous: bool = False

    max_amount: Decimal = Decimal("0")  # Capacity the request was checked against
    is_max_request: bool = False

    @property
    def is_blocked(self) -> bool:
        return self.blocking_reason is not None
