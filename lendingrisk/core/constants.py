"""Generic constants for lending risk calculations.

These constants are protocol-agnostic defaults. The engine never reads them
implicitly: they seed ``RiskParameters`` and ``Settings``.
"""

from decimal import Decimal

# Precision constants
USD_DECIMALS = 8  # Oracle USD prices carry 8 decimals
DEFAULT_DECIMAL_PRECISION = 60  # Significant digits for the engine's decimal context
THRESHOLD_PRECISION_PLACES = 4  # Liquidation threshold after withdraw is truncated to 4 places
USD_PRECISION_PLACES = 2

# Health factor boundaries
LIQUIDATION_HEALTH_FACTOR = Decimal("1")
DANGEROUS_HEALTH_FACTOR = Decimal("1.05")  # Early warning band above liquidation
HEALTH_FACTOR_INFINITE = Decimal("Infinity")  # No debt, no liquidation risk

# Settlement tolerance margins
BORROW_SAFETY_MARGIN = Decimal("0.99")  # Applied to borrow headroom when the user already has debt
WITHDRAW_THRESHOLD_PADDING = Decimal("0.01")  # Added to the liquidation threshold for withdraw headroom
WITHDRAW_SAFETY_MARGIN = Decimal("0.99")

# E-mode category meaning "no e-mode"
NO_EMODE_CATEGORY = 0

ZERO = Decimal("0")
ONE = Decimal("1")
