"""Pytest configuration and fixtures."""

import pytest
from decimal import Decimal
from typing import Optional

from lendingrisk.core.constants import HEALTH_FACTOR_INFINITE
from lendingrisk.core.models import (
    ReferenceCurrencyConversion,
    ReserveSnapshot,
    UserAggregatePosition,
    UserReservePosition,
)
from lendingrisk.core.parameters import RiskParameters
from lendingrisk.engine import RiskEngine
from lendingrisk.protocols.aave.assets import StaticAssetClassifier


def make_user(
    collateral: str = "1000",
    borrows: str = "500",
    threshold: str = "0.8",
    available: str = "0",
    health_factor: Optional[str] = None,
    is_in_isolation_mode: bool = False,
    emode_category_id: int = 0,
) -> UserAggregatePosition:
    """Create an aggregate position; the health factor is derived unless given."""
    collateral_value = Decimal(collateral)
    borrows_value = Decimal(borrows)
    threshold_value = Decimal(threshold)

    if health_factor is not None:
        hf = Decimal(health_factor)
    elif borrows_value == 0:
        hf = HEALTH_FACTOR_INFINITE
    else:
        hf = collateral_value * threshold_value / borrows_value

    return UserAggregatePosition(
        total_collateral_in_reference_currency=collateral_value,
        total_borrows_in_reference_currency=borrows_value,
        available_borrows_in_reference_currency=Decimal(available),
        current_liquidation_threshold=threshold_value,
        health_factor=hf,
        is_in_isolation_mode=is_in_isolation_mode,
        emode_category_id=emode_category_id,
    )


def make_reserve(
    reserve_id: str = "weth",
    symbol: str = "WETH",
    price: str = "2000",
    decimals: int = 18,
    **overrides,
) -> ReserveSnapshot:
    """Create a reserve with sensible defaults."""
    fields = dict(
        id=reserve_id,
        underlying_asset=f"0x{reserve_id}",
        symbol=symbol,
        price_in_reference_currency=Decimal(price),
        decimals=decimals,
        available_liquidity=Decimal("1000000"),
        unborrowed_liquidity=Decimal("1000000"),
        total_debt=Decimal("500000"),
        total_liquidity_usd=Decimal("10000000"),
        borrowing_enabled=True,
        is_active=True,
        usage_as_collateral_enabled=True,
        variable_borrow_apy=Decimal("0.035"),
        loan_to_value=Decimal("0.8"),
        liquidation_threshold=Decimal("0.8"),
    )
    fields.update(overrides)
    return ReserveSnapshot(**fields)


@pytest.fixture
def params() -> RiskParameters:
    """Default protocol tolerance parameters."""
    return RiskParameters()


@pytest.fixture
def classifier() -> StaticAssetClassifier:
    return StaticAssetClassifier()


@pytest.fixture
def engine(params, classifier) -> RiskEngine:
    return RiskEngine(params, classifier)


@pytest.fixture
def usd_conversion() -> ReferenceCurrencyConversion:
    """USD-based market: 1 reference unit = 1 USD (8 decimals)."""
    return ReferenceCurrencyConversion(market_reference_price_in_usd=Decimal("100000000"))


@pytest.fixture
def weth_reserve() -> ReserveSnapshot:
    return make_reserve(
        "weth",
        "WETH",
        price="2000",
        decimals=18,
        available_liquidity=Decimal("1000"),
        unborrowed_liquidity=Decimal("1000"),
        total_liquidity_usd=Decimal("4000000"),
        loan_to_value=Decimal("0.8"),
        liquidation_threshold=Decimal("0.825"),
        emode_category_id=1,
        emode_loan_to_value=Decimal("0.9"),
        emode_liquidation_threshold=Decimal("0.93"),
    )


@pytest.fixture
def wsteth_reserve() -> ReserveSnapshot:
    return make_reserve(
        "wsteth",
        "wstETH",
        price="2300",
        decimals=18,
        available_liquidity=Decimal("500"),
        unborrowed_liquidity=Decimal("500"),
        loan_to_value=Decimal("0.7"),
        liquidation_threshold=Decimal("0.75"),
        emode_category_id=1,
        emode_loan_to_value=Decimal("0.9"),
        emode_liquidation_threshold=Decimal("0.93"),
    )


@pytest.fixture
def usdc_reserve() -> ReserveSnapshot:
    return make_reserve(
        "usdc",
        "USDC",
        price="1",
        decimals=6,
        borrowable_in_isolation=True,
        stable_borrow_rate_enabled=True,
        stable_borrow_apy=Decimal("0.06"),
        variable_borrow_apy=Decimal("0.045"),
        loan_to_value=Decimal("0.77"),
        liquidation_threshold=Decimal("0.8"),
    )


@pytest.fixture
def dai_reserve() -> ReserveSnapshot:
    return make_reserve(
        "dai",
        "DAI",
        price="1",
        decimals=18,
        loan_to_value=Decimal("0.75"),
        liquidation_threshold=Decimal("0.77"),
    )


@pytest.fixture
def isolated_reserve() -> ReserveSnapshot:
    """High-risk collateral with a debt ceiling."""
    return make_reserve(
        "crv",
        "CRV",
        price="0.5",
        decimals=18,
        borrowing_enabled=False,
        loan_to_value=Decimal("0.4"),
        liquidation_threshold=Decimal("0.5"),
        debt_ceiling=Decimal("5000000"),
    )


@pytest.fixture
def collateral_position() -> UserReservePosition:
    """1 WETH supplied as collateral."""
    return UserReservePosition(
        reserve_id="weth",
        underlying_balance=Decimal("1"),
        usage_as_collateral_enabled_on_user=True,
    )


@pytest.fixture
def user_factory():
    """Factory for aggregate positions."""
    return make_user


@pytest.fixture
def reserve_factory():
    """Factory for reserve snapshots."""
    return make_reserve
