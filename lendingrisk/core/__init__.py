"""Core module - models, constants, arithmetic and parameters."""

from .constants import HEALTH_FACTOR_INFINITE, NO_EMODE_CATEGORY, USD_DECIMALS
from .errors import (
    DivisionByZero,
    InvalidSnapshot,
    MissingReserve,
    MissingUserPosition,
    RiskEngineError,
)
from .math import DecimalMath
from .parameters import DEFAULT_RISK_PARAMETERS, RiskParameters

__all__ = [
    "HEALTH_FACTOR_INFINITE",
    "NO_EMODE_CATEGORY",
    "USD_DECIMALS",
    "DivisionByZero",
    "InvalidSnapshot",
    "MissingReserve",
    "MissingUserPosition",
    "RiskEngineError",
    "DecimalMath",
    "DEFAULT_RISK_PARAMETERS",
    "RiskParameters",
]
