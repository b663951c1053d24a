"""Pool data payload parser.

Converts reserve and user reserve payloads, as served by the pool data
provider (camelCase keys, values already formatted to human units), into
engine snapshots.

Unlike a display parser, risk parameters never fall back to zero: a missing
or malformed price, liquidity, LTV or threshold raises ``InvalidSnapshot``,
since treating bad data as "no capacity" would hide upstream corruption.
Optional fields (rates, totals, debt ceiling) default to zero.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from lendingrisk.core.constants import NO_EMODE_CATEGORY, USD_DECIMALS
from lendingrisk.core.errors import InvalidSnapshot
from lendingrisk.core.math import DecimalMath
from lendingrisk.core.models import (
    PoolSnapshot,
    ReferenceCurrencyConversion,
    ReserveSnapshot,
    UserReservePosition,
)

_MISSING = object()


class SnapshotParser:
    """Parser for pool data provider payloads."""

    @staticmethod
    def parse_decimal(data: Dict[str, Any], *keys: str, default: Any = _MISSING) -> Decimal:
        """
        Parse the first present key to Decimal.

        Accepts strings, integers and Decimals. Floats are rejected because
        they cannot carry exact on-chain amounts.

        Raises:
            InvalidSnapshot: If no key is present and there is no default,
                or the value is not an exact number
        """
        for key in keys:
            value = data.get(key)
            if value is not None:
                try:
                    return DecimalMath.to_decimal(value)
                except InvalidSnapshot as e:
                    raise InvalidSnapshot(f"Field {key}: {e}") from None
        if default is _MISSING:
            raise InvalidSnapshot(f"Missing required field: {' / '.join(keys)}")
        return default

    @staticmethod
    def parse_int(data: Dict[str, Any], key: str, default: Any = _MISSING) -> int:
        value = data.get(key)
        if value is None:
            if default is _MISSING:
                raise InvalidSnapshot(f"Missing required field: {key}")
            return default
        if isinstance(value, bool) or isinstance(value, float):
            raise InvalidSnapshot(f"Field {key}: expected an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise InvalidSnapshot(f"Field {key}: expected an integer, got {value!r}") from None

    @staticmethod
    def parse_bool(data: Dict[str, Any], key: str, default: bool = False) -> bool:
        value = data.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise InvalidSnapshot(f"Field {key}: expected a boolean, got {value!r}")
        return value

    @staticmethod
    def parse_str(data: Dict[str, Any], key: str) -> str:
        value = data.get(key)
        if not isinstance(value, str) or not value:
            raise InvalidSnapshot(f"Missing required field: {key}")
        return value

    @classmethod
    def parse_reserve(cls, reserve_data: Dict[str, Any]) -> ReserveSnapshot:
        """Parse one reserve payload.

        Args:
            reserve_data: Formatted reserve data

        Returns:
            ReserveSnapshot

        Raises:
            InvalidSnapshot: Missing or malformed field, or violated invariant
        """
        zero = Decimal("0")
        emode_category_id = cls.parse_int(reserve_data, "eModeCategoryId", default=NO_EMODE_CATEGORY)
        # E-mode parameters are required once the reserve belongs to a category
        emode_default = zero if emode_category_id == NO_EMODE_CATEGORY else _MISSING
        return ReserveSnapshot(
            id=cls.parse_str(reserve_data, "id"),
            underlying_asset=cls.parse_str(reserve_data, "underlyingAsset"),
            symbol=cls.parse_str(reserve_data, "symbol"),
            price_in_reference_currency=cls.parse_decimal(
                reserve_data, "formattedPriceInMarketReferenceCurrency", "priceInMarketReferenceCurrency"
            ),
            decimals=cls.parse_int(reserve_data, "decimals"),
            available_liquidity=cls.parse_decimal(reserve_data, "availableLiquidity"),
            unborrowed_liquidity=cls.parse_decimal(
                reserve_data, "unborrowedLiquidity", "availableLiquidity"
            ),
            total_debt=cls.parse_decimal(reserve_data, "totalDebt", default=zero),
            total_liquidity_usd=cls.parse_decimal(reserve_data, "totalLiquidityUSD", default=zero),
            is_active=cls.parse_bool(reserve_data, "isActive", default=True),
            is_frozen=cls.parse_bool(reserve_data, "isFrozen"),
            borrowing_enabled=cls.parse_bool(reserve_data, "borrowingEnabled"),
            borrowable_in_isolation=cls.parse_bool(reserve_data, "borrowableInIsolation"),
            usage_as_collateral_enabled=cls.parse_bool(reserve_data, "usageAsCollateralEnabled"),
            stable_borrow_rate_enabled=cls.parse_bool(reserve_data, "stableBorrowRateEnabled"),
            stable_borrow_apy=cls.parse_decimal(reserve_data, "stableBorrowAPY", default=zero),
            variable_borrow_apy=cls.parse_decimal(reserve_data, "variableBorrowAPY", default=zero),
            loan_to_value=cls.parse_decimal(reserve_data, "formattedBaseLTVasCollateral"),
            liquidation_threshold=cls.parse_decimal(
                reserve_data, "formattedReserveLiquidationThreshold", "liquidationThreshold"
            ),
            debt_ceiling=cls.parse_decimal(reserve_data, "debtCeiling", default=zero),
            emode_category_id=emode_category_id,
            emode_loan_to_value=cls.parse_decimal(reserve_data, "formattedEModeLtv", default=emode_default),
            emode_liquidation_threshold=cls.parse_decimal(
                reserve_data, "formattedEModeLiquidationThreshold", "eModeLiquidationThreshold", default=emode_default
            ),
        )

    @classmethod
    def parse_user_reserve(cls, user_reserve_data: Dict[str, Any]) -> UserReservePosition:
        """Parse one user reserve payload.

        The reserve is referenced either by ``reserveId`` or by a nested
        ``reserve`` object carrying an ``id``.
        """
        reserve_id = user_reserve_data.get("reserveId")
        if reserve_id is None:
            nested = user_reserve_data.get("reserve") or {}
            reserve_id = nested.get("id")
        if not reserve_id:
            raise InvalidSnapshot("User reserve without reserve id")

        zero = Decimal("0")
        return UserReservePosition(
            reserve_id=reserve_id,
            underlying_balance=cls.parse_decimal(user_reserve_data, "underlyingBalance", default=zero),
            usage_as_collateral_enabled_on_user=cls.parse_bool(
                user_reserve_data, "usageAsCollateralEnabledOnUser"
            ),
            total_borrows=cls.parse_decimal(user_reserve_data, "totalBorrows", default=zero),
            total_borrows_usd=cls.parse_decimal(user_reserve_data, "totalBorrowsUSD", default=zero),
        )

    @classmethod
    def parse_reserves(cls, reserves_data: List[Dict[str, Any]]) -> List[ReserveSnapshot]:
        return [cls.parse_reserve(item) for item in reserves_data]

    @classmethod
    def parse_user_positions(cls, user_reserves_data: List[Dict[str, Any]]) -> List[UserReservePosition]:
        return [cls.parse_user_reserve(item) for item in user_reserves_data]

    @classmethod
    def parse_conversion(cls, data: Dict[str, Any]) -> ReferenceCurrencyConversion:
        return ReferenceCurrencyConversion(
            market_reference_price_in_usd=cls.parse_decimal(data, "marketReferencePriceInUsd"),
            usd_decimals_exponent=cls.parse_int(data, "usdDecimals", default=USD_DECIMALS),
        )

    @classmethod
    def parse_pool_snapshot(
        cls,
        data: Dict[str, Any],
        user_reserves: Optional[List[Dict[str, Any]]] = None,
    ) -> PoolSnapshot:
        """Parse a full payload with ``reserves``, ``userReserves`` and conversion fields.

        Raises:
            MissingReserve: A user reserve refers to a reserve not in ``reserves``
        """
        reserves = cls.parse_reserves(data.get("reserves") or [])
        if user_reserves is None:
            user_reserves = data.get("userReserves") or []
        snapshot = PoolSnapshot(
            reserves=tuple(reserves),
            conversion=cls.parse_conversion(data),
            positions=tuple(cls.parse_user_positions(user_reserves)),
            user_emode_category_id=cls.parse_int(data, "userEmodeCategoryId", default=NO_EMODE_CATEGORY),
        )
        # Fail fast on dangling references
        for position in snapshot.positions:
            snapshot.reserve(position.reserve_id)
        return snapshot
