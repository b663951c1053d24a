"""Exceptions raised by the risk engine.

Expected user-facing outcomes (insufficient balance, health factor, ...) are
not exceptions: they are reported as ``BlockingReason`` values on
``ActionOutcome``. The classes below signal bad input and are always
propagated to the caller.
"""


class RiskEngineError(Exception):
    """Base class for all risk engine errors."""


class DivisionByZero(RiskEngineError, ArithmeticError):
    """Division by a zero divisor, e.g. a reserve priced at zero."""

    def __init__(self, dividend, operation: str = "division"):
        self.dividend = dividend
        self.operation = operation
        super().__init__(f"Division by zero in {operation} (dividend={dividend})")


class MissingReserve(RiskEngineError, LookupError):
    """A reserve id is absent from the supplied snapshot."""

    def __init__(self, reserve_id: str):
        self.reserve_id = reserve_id
        super().__init__(f"Reserve not found: {reserve_id}")


class MissingUserPosition(RiskEngineError, LookupError):
    """The user holds no position in the requested reserve."""

    def __init__(self, reserve_id: str):
        self.reserve_id = reserve_id
        super().__init__(f"User position not found for reserve: {reserve_id}")


class InvalidSnapshot(RiskEngineError, ValueError):
    """A snapshot field is missing, malformed or violates an invariant."""
