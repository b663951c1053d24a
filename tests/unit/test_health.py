"""Unit tests for the health factor engine."""

import pytest
from decimal import Decimal

from lendingrisk.core.constants import HEALTH_FACTOR_INFINITE
from lendingrisk.engine.health import HealthFactorEngine, RiskBand, is_infinite


class TestHealthFactor:
    """Tests for the base health factor formula."""

    @pytest.fixture
    def health(self, params):
        return HealthFactorEngine(params)

    def test_health_factor(self, health):
        """Test collateral 1000, threshold 0.8, borrows 500 gives 1.6."""
        hf = health.health_factor(Decimal("1000"), Decimal("500"), Decimal("0.8"))
        assert hf == Decimal("1.6")

    def test_zero_debt_is_infinite(self, health):
        """Test zero debt returns the infinite sentinel."""
        hf = health.health_factor(Decimal("1000"), Decimal("0"), Decimal("0.8"))
        assert hf == HEALTH_FACTOR_INFINITE
        assert is_infinite(hf)
        assert hf > Decimal("1e30")

    def test_zero_collateral_with_debt(self, health):
        hf = health.health_factor(Decimal("0"), Decimal("100"), Decimal("0"))
        assert hf == Decimal("0")


class TestProjectedHealthFactor:
    """Tests for health factor after withdraw / borrow."""

    @pytest.fixture
    def health(self, params):
        return HealthFactorEngine(params)

    def test_withdraw_same_threshold(self, health, user_factory):
        """Test withdrawing collateral with the average threshold."""
        user = user_factory(collateral="1000", borrows="500", threshold="0.8")
        hf = health.projected_health_factor_after_withdraw(user, Decimal("100"), Decimal("0.8"))
        # (1000 - 100) * 0.8 / 500
        assert hf == Decimal("1.44")

    def test_withdraw_threshold_truncated(self, health, user_factory):
        """Test threshold after withdraw is rounded down to 4 digits."""
        user = user_factory(collateral="1000", borrows="500", threshold="0.8")
        collateral_after, threshold_after = health.position_after_withdraw(
            user, Decimal("300"), Decimal("0.7")
        )
        # (800 - 210) / 700 = 0.842857...
        assert collateral_after == Decimal("700")
        assert threshold_after == Decimal("0.8428")

        hf = health.projected_health_factor_after_withdraw(user, Decimal("300"), Decimal("0.7"))
        assert hf == Decimal("700") * Decimal("0.8428") / Decimal("500")

    def test_withdraw_all_collateral_with_debt(self, health, user_factory):
        """Test removing all collateral yields zero health factor."""
        user = user_factory(collateral="1000", borrows="500", threshold="0.8")
        hf = health.projected_health_factor_after_withdraw(user, Decimal("1000"), Decimal("0.8"))
        assert hf == Decimal("0")

    def test_withdraw_without_debt(self, health, user_factory):
        user = user_factory(collateral="1000", borrows="0")
        hf = health.projected_health_factor_after_withdraw(user, Decimal("400"), Decimal("0.8"))
        assert is_infinite(hf)

    def test_borrow(self, health, user_factory):
        """Test adding debt keeps collateral and threshold."""
        user = user_factory(collateral="1000", borrows="500", threshold="0.8")
        hf = health.projected_health_factor_after_borrow(user, Decimal("140"))
        assert hf == Decimal("1.25")

    def test_first_borrow(self, health, user_factory):
        user = user_factory(collateral="1000", borrows="0", threshold="0.8")
        hf = health.projected_health_factor_after_borrow(user, Decimal("400"))
        assert hf == Decimal("2")


class TestRiskClassification:
    """Tests for danger and risk band classification."""

    @pytest.fixture
    def health(self, params):
        return HealthFactorEngine(params)

    def test_dangerous_at_boundary(self, health):
        """Test 1.05 with debt is dangerous."""
        assert health.is_dangerous(Decimal("1.05"), has_debt=True) is True

    def test_not_dangerous_above_boundary(self, health):
        """Test 1.06 with debt is not dangerous."""
        assert health.is_dangerous(Decimal("1.06"), has_debt=True) is False

    def test_not_dangerous_without_debt(self, health):
        assert health.is_dangerous(Decimal("0.5"), has_debt=False) is False
        assert health.is_dangerous(HEALTH_FACTOR_INFINITE, has_debt=False) is False

    def test_classify(self, health):
        assert health.classify(HEALTH_FACTOR_INFINITE) == RiskBand.NO_DEBT
        assert health.classify(Decimal("0.99")) == RiskBand.LIQUIDATABLE
        assert health.classify(Decimal("1")) == RiskBand.DANGEROUS
        assert health.classify(Decimal("1.05")) == RiskBand.DANGEROUS
        assert health.classify(Decimal("1.5")) == RiskBand.HEALTHY

    def test_custom_dangerous_threshold(self, params):
        from dataclasses import replace

        health = HealthFactorEngine(replace(params, dangerous_health_factor=Decimal("1.2")))
        assert health.is_dangerous(Decimal("1.1"), has_debt=True) is True
