"""
Tests for withdrawal policies.
"""

import numpy as np
import pytest
from pydantic import ValidationError

from horizon.models.errors import UnknownWithdrawalStrategyError
from horizon.models.withdrawal_rules import (
    WITHDRAWAL_POLICIES,
    BucketWithdrawalPolicy,
    ClassicWithdrawalPolicy,
    DecumulationAssumptions,
    GuardrailsWithdrawalPolicy,
    PolicyState,
    VariableWithdrawalPolicy,
    YearState,
    create_withdrawal_policy,
)


def _year(year_index, start_balance, needed=40000.0, inflation=0.02):
    return YearState(
        year_index=year_index,
        age=60 + year_index,
        start_balance=start_balance,
        needed_from_portfolio=needed,
        inflation_factor=(1 + inflation) ** year_index,
    )


class TestDecumulationAssumptions:
    """Test DecumulationAssumptions validation."""

    def test_defaults(self):
        assumptions = DecumulationAssumptions()

        assert assumptions.annual_return == 0.07
        assert assumptions.inflation_rate == 0.02
        assert assumptions.withdrawal_rate == 0.04
        assert assumptions.inflation_indexed is True
        assert assumptions.stock_return == 0.07
        assert assumptions.state_pension.start_age == 67

    def test_inflation_factor(self):
        assumptions = DecumulationAssumptions()
        assert assumptions.inflation_factor(0) == 1.0
        assert assumptions.inflation_factor(2) == pytest.approx(1.0404)

    def test_inflation_factor_not_indexed(self):
        assumptions = DecumulationAssumptions(inflation_indexed=False)
        assert assumptions.inflation_factor(10) == 1.0

    def test_stock_return_override(self):
        assumptions = DecumulationAssumptions(bucket_stock_return=0.05)
        assert assumptions.stock_return == 0.05

    def test_invalid_withdrawal_rate(self):
        with pytest.raises(ValidationError):
            DecumulationAssumptions(withdrawal_rate=0)

    def test_invalid_inflation_rate(self):
        with pytest.raises(ValidationError):
            DecumulationAssumptions(inflation_rate=-0.01)


class TestClassicWithdrawalPolicy:
    """Test the 4% rule."""

    def test_first_year_is_four_percent(self):
        policy = ClassicWithdrawalPolicy(1000000, DecumulationAssumptions())
        requested, _ = policy.step(_year(0, 1000000), PolicyState())
        assert requested == pytest.approx(40000)

    def test_indexed_for_inflation(self):
        """Test that the withdrawal follows inflation, not the balance."""
        policy = ClassicWithdrawalPolicy(1000000, DecumulationAssumptions())
        requested, _ = policy.step(_year(3, 200000), PolicyState())
        assert requested == pytest.approx(40000 * 1.02**3)

    def test_default_growth(self):
        policy = ClassicWithdrawalPolicy(1000000, DecumulationAssumptions())
        growth, _ = policy.settle(_year(0, 1000000), 40000, PolicyState())
        assert growth == pytest.approx(960000 * 0.07)

    def test_negative_portfolio_clamped(self):
        policy = ClassicWithdrawalPolicy(-1000, DecumulationAssumptions())
        assert policy.baseline_withdrawal == 0


class TestVariableWithdrawalPolicy:
    def test_percentage_of_current_balance(self):
        policy = VariableWithdrawalPolicy(1000000, DecumulationAssumptions())
        requested, _ = policy.step(_year(5, 500000), PolicyState())
        assert requested == pytest.approx(20000)


class TestGuardrailsWithdrawalPolicy:
    """Test Guyton-Klinger guardrails."""

    def test_first_year_is_baseline(self):
        policy = GuardrailsWithdrawalPolicy(1000000, DecumulationAssumptions())
        requested, state = policy.step(_year(0, 1000000), PolicyState())

        assert requested == pytest.approx(40000)
        assert state.real_withdrawal == pytest.approx(40000)

    def test_raise_above_upper_guardrail(self):
        """Test a 10% raise when the balance is well above the adjusted initial."""
        policy = GuardrailsWithdrawalPolicy(1000000, DecumulationAssumptions())
        _, state = policy.step(_year(0, 1000000), PolicyState())
        requested, state = policy.step(_year(1, 1500000), state)

        assert state.real_withdrawal == pytest.approx(44000)
        assert requested == pytest.approx(44000 * 1.02)

    def test_cut_below_lower_guardrail(self):
        policy = GuardrailsWithdrawalPolicy(1000000, DecumulationAssumptions())
        _, state = policy.step(_year(0, 1000000), PolicyState())
        _, state = policy.step(_year(1, 500000), state)

        assert state.real_withdrawal == pytest.approx(36000)

    def test_inside_guardrails_follows_inflation(self):
        policy = GuardrailsWithdrawalPolicy(1000000, DecumulationAssumptions())
        _, state = policy.step(_year(0, 1000000), PolicyState())
        requested, state = policy.step(_year(1, 1000000), state)

        assert state.real_withdrawal == pytest.approx(40000)
        assert requested == pytest.approx(40800)

    def test_repeated_raises_hit_ceiling(self):
        policy = GuardrailsWithdrawalPolicy(1000000, DecumulationAssumptions())
        state = PolicyState()
        for year_index in range(10):
            _, state = policy.step(_year(year_index, 5000000), state)
        assert state.real_withdrawal == pytest.approx(48000)

    def test_real_withdrawal_stays_in_band(self):
        """Test the [0.8, 1.2] band across randomized balance trajectories."""
        rng = np.random.default_rng(2024)
        baseline = 40000

        for _ in range(50):
            policy = GuardrailsWithdrawalPolicy(1000000, DecumulationAssumptions())
            state = PolicyState()
            balances = rng.uniform(0, 3000000, size=40)
            for year_index, balance in enumerate(balances):
                year = _year(year_index, float(balance))
                requested, state = policy.step(year, state)
                real = requested / year.inflation_factor

                assert 0.8 * baseline - 1e-6 <= real <= 1.2 * baseline + 1e-6


class TestBucketWithdrawalPolicy:
    """Test the three-bucket strategy."""

    def test_initial_split(self):
        """Test cash for 3 years, bonds for 7 years and stocks for the rest."""
        policy = BucketWithdrawalPolicy(1000000, DecumulationAssumptions())
        state = policy.initial_state(40000)

        assert state.cash == pytest.approx(120000)
        assert state.bonds == pytest.approx(280000)
        assert state.stocks == pytest.approx(600000)

    def test_small_portfolio_fills_cash_first(self):
        policy = BucketWithdrawalPolicy(50000, DecumulationAssumptions())
        state = policy.initial_state(40000)

        assert state.cash == pytest.approx(50000)
        assert state.bonds == 0
        assert state.stocks == 0

    def test_requests_full_need(self):
        policy = BucketWithdrawalPolicy(1000000, DecumulationAssumptions())
        requested, _ = policy.step(_year(0, 1000000, needed=35000), PolicyState())
        assert requested == 35000

    def test_settle_refills_cash(self):
        """Test growth per bucket followed by refills from bonds then stocks."""
        policy = BucketWithdrawalPolicy(1000000, DecumulationAssumptions())
        state = policy.initial_state(40000)
        growth, state = policy.settle(_year(0, 1000000), 40000, state)

        assert growth == pytest.approx(280000 * 0.03 + 600000 * 0.07)
        assert state.refilled is True
        assert state.cash == pytest.approx(120000)
        assert state.bonds == pytest.approx(280000)
        assert state.cash + state.bonds + state.stocks == pytest.approx(
            1000000 - 40000 + growth
        )

    def test_cash_topped_up_when_short(self):
        """Test that a short cash bucket borrows from bonds before paying out."""
        policy = BucketWithdrawalPolicy(1000000, DecumulationAssumptions())
        state = PolicyState(cash=10000, bonds=50000, stocks=0)
        growth, state = policy.settle(_year(0, 60000), 40000, state)

        # 20000 bonds left after the top-up grow 3%, then move to cash
        assert growth == pytest.approx(600)
        assert state.cash == pytest.approx(20600)
        assert state.bonds == 0
        assert state.stocks == 0
        assert state.refilled is True

    def test_cash_never_negative(self):
        policy = BucketWithdrawalPolicy(1000000, DecumulationAssumptions())
        state = PolicyState(cash=5000, bonds=0, stocks=0)
        _, state = policy.settle(_year(0, 5000), 5000, state)

        assert state.cash == 0
        assert state.refilled is False


class TestCreateWithdrawalPolicy:
    def test_registry(self):
        assert set(WITHDRAWAL_POLICIES) == {"classic", "variable", "guardrails", "bucket"}

    @pytest.mark.parametrize("strategy", ["classic", "variable", "guardrails", "bucket"])
    def test_create_by_name(self, strategy):
        policy = create_withdrawal_policy(strategy, 1000000)
        assert policy.name == strategy
        assert policy.assumptions == DecumulationAssumptions()

    def test_unknown_strategy(self):
        with pytest.raises(UnknownWithdrawalStrategyError) as exc_info:
            create_withdrawal_policy("yolo", 1000000)
        assert "yolo" in str(exc_info.value)
        assert exc_info.value.strategy == "yolo"
