"""
Tests for behavioural scenario projections.
"""

import math

import pandas as pd
import pytest

from horizon.models.errors import UnknownMarketWeatherError
from horizon.models.scenarios import (
    SCENARIO_PROFILES,
    SWR,
    compute_scenarios,
    fire_target_for,
    project_forward,
    simulate_profile,
)
from horizon.models.snapshot import FinancialSnapshot


def _fire_age_key(age):
    """Sort key treating an unreached FIRE age as later than any age."""
    return math.inf if age is None else age


class TestScenarioProfiles:
    """Test the profile parameter table."""

    def test_profiles_in_order(self):
        assert list(SCENARIO_PROFILES) == ["drifter", "current", "optimizer"]

    def test_drifter_expenses_grow_yearly(self, sample_snapshot):
        drifter = SCENARIO_PROFILES["drifter"]
        assert drifter.monthly_expenses(sample_snapshot, 0) == 2500
        assert drifter.monthly_expenses(sample_snapshot, 11) == 2500
        assert drifter.monthly_expenses(sample_snapshot, 12) == pytest.approx(2575)
        assert drifter.monthly_expenses(sample_snapshot, 24) == pytest.approx(2500 * 1.03**2)

    def test_current_is_constant(self, sample_snapshot):
        current = SCENARIO_PROFILES["current"]
        assert current.monthly_expenses(sample_snapshot, 120) == 2500
        assert current.monthly_savings(sample_snapshot, 120) == 1500

    def test_optimizer_cuts_expenses_and_raises_contributions(self, sample_snapshot):
        """Test the optimizer's -10% expenses and +20% contributions."""
        optimizer = SCENARIO_PROFILES["optimizer"]
        assert optimizer.monthly_expenses(sample_snapshot, 0) == pytest.approx(2250)
        # 4000 - 2250 + 500 * 0.2
        assert optimizer.monthly_savings(sample_snapshot, 0) == pytest.approx(1850)


class TestFireTarget:
    def test_target_at_swr(self):
        assert fire_target_for(2500) == pytest.approx(2500 * 12 / SWR)
        assert fire_target_for(2500) == pytest.approx(750000)

    def test_no_target_without_expenses(self):
        assert fire_target_for(0) is None


class TestSimulateProfile:
    """Test the shared monthly stepping loop."""

    def test_linear_growth_without_returns(self):
        """Test that savings accumulate linearly at a zero return."""
        snapshot = FinancialSnapshot(total_assets=0, monthly_income=1000)
        path = simulate_profile(
            snapshot, SCENARIO_PROFILES["current"], 12, annual_return=0.0
        )

        assert len(path.months) == 13
        assert path.months[0].net_worth == 0
        assert path.months[0].savings == 0
        assert path.months[1].savings == 1000
        assert path.months[1].growth == 0
        assert path.final_net_worth == pytest.approx(12000)
        assert path.fire_age is None

    def test_monthly_compounding(self):
        snapshot = FinancialSnapshot(total_assets=100000)
        path = simulate_profile(
            snapshot, SCENARIO_PROFILES["current"], 12, annual_return=0.06
        )
        assert path.final_net_worth == pytest.approx(100000 * 1.005**12)
        assert path.months[1].growth == pytest.approx(500)

    def test_ages_follow_months(self):
        snapshot = FinancialSnapshot(total_assets=0)
        path = simulate_profile(
            snapshot, SCENARIO_PROFILES["current"], 24, current_age=30.0
        )
        assert path.months[0].age == 30.0
        assert path.months[12].age == pytest.approx(31.0)
        assert path.months[24].age == pytest.approx(32.0)

    def test_already_independent_fires_at_month_zero(self):
        snapshot = FinancialSnapshot(total_assets=1000000, monthly_expenses=2000)
        path = simulate_profile(
            snapshot,
            SCENARIO_PROFILES["current"],
            120,
            current_age=50.0,
            stop_at_fire=True,
        )
        assert path.fire_month == 0
        assert path.fire_age == 50.0
        assert len(path.months) == 1

    def test_passive_income_at_swr(self):
        snapshot = FinancialSnapshot(total_assets=300000)
        path = simulate_profile(snapshot, SCENARIO_PROFILES["current"], 0)
        assert path.months[0].passive_income == pytest.approx(1000)


class TestComputeScenarios:
    """Test the three-profile projection."""

    def test_end_to_end_scenario(self, sample_snapshot):
        """Test the reference household over 40 years."""
        paths = compute_scenarios(sample_snapshot, years=40)

        assert [path.name for path in paths] == ["drifter", "current", "optimizer"]
        drifter, current, optimizer = paths

        for path in paths:
            assert len(path.months) == 40 * 12 + 1
            assert path.months[0].net_worth == 130000

        assert current.months[0].fire_target == pytest.approx(750000)
        assert _fire_age_key(optimizer.fire_age) <= _fire_age_key(current.fire_age)
        assert _fire_age_key(current.fire_age) <= _fire_age_key(drifter.fire_age)

    def test_current_reaches_fire(self, sample_snapshot):
        """Test that the reference household reaches FIRE on its current course."""
        current = compute_scenarios(sample_snapshot)[1]

        assert current.fire_month is not None
        month = current.months[current.fire_month]
        assert month.net_worth >= month.fire_target
        assert current.months[current.fire_month - 1].net_worth < month.fire_target
        assert current.fire_age == pytest.approx(month.age)

    def test_fallback_age_without_birth_date(self):
        snapshot = FinancialSnapshot(
            total_assets=1000000, monthly_income=2500, monthly_expenses=2000
        )
        paths = compute_scenarios(snapshot, years=1, fallback_age=40.0)

        for path in paths:
            assert path.months[0].age == 40.0
            assert path.fire_age == 40.0

    def test_zero_years(self, sample_snapshot):
        for path in compute_scenarios(sample_snapshot, years=0):
            assert len(path.months) == 1

    def test_years_out_of_range(self, sample_snapshot):
        with pytest.raises(ValueError):
            compute_scenarios(sample_snapshot, years=41)
        with pytest.raises(ValueError):
            compute_scenarios(sample_snapshot, years=-1)

    def test_no_expenses_means_no_fire_age(self):
        snapshot = FinancialSnapshot(total_assets=50000, monthly_income=3000)
        for path in compute_scenarios(snapshot, years=5):
            assert path.fire_age is None
            assert path.months[0].fire_target is None

    def test_drifter_with_deficit_never_increases(self):
        """Test that a drifter spending more than they earn never gains."""
        snapshot = FinancialSnapshot(
            total_assets=0,
            total_debts=5000,
            monthly_income=2000,
            monthly_expenses=2500,
        )
        drifter = compute_scenarios(snapshot, years=10)[0]

        net_worths = [point.net_worth for point in drifter.months]
        assert all(b <= a for a, b in zip(net_worths, net_worths[1:]))
        assert drifter.fire_age is None

    @pytest.mark.parametrize("market_weather", ["normal", "bull", "bear"])
    def test_wealthy_drifter_with_deficit_never_increases(self, market_weather):
        """Test that returns only soften a deficit and never reach FIRE."""
        snapshot = FinancialSnapshot(
            total_assets=800000,
            monthly_income=2000,
            monthly_expenses=2500,
            date_of_birth="1990-01-01",
        )
        drifter = compute_scenarios(
            snapshot, years=40, market_weather=market_weather
        )[0]

        net_worths = [point.net_worth for point in drifter.months]
        assert all(b <= a for a, b in zip(net_worths, net_worths[1:]))
        assert drifter.months[0].net_worth >= drifter.months[0].fire_target
        assert drifter.fire_age is None
        assert drifter.fire_month is None

    def test_balanced_drifter_never_reaches_fire(self):
        snapshot = FinancialSnapshot(
            total_assets=2000000, monthly_income=2500, monthly_expenses=2500
        )
        drifter, current, _ = compute_scenarios(snapshot, years=5, fallback_age=50.0)

        assert drifter.fire_age is None
        assert drifter.final_net_worth <= 2000000
        assert current.fire_age == 50.0

    def test_drifter_savings_erode(self):
        """Test that the drifter saves less each year than the current course."""
        snapshot = FinancialSnapshot(
            total_assets=0, monthly_income=4000, monthly_expenses=2000
        )
        drifter = SCENARIO_PROFILES["drifter"]

        assert drifter.monthly_savings(snapshot, 0) == pytest.approx(2000)
        assert drifter.monthly_savings(snapshot, 12) == pytest.approx(
            (4000 - 2060) * 0.98
        )
        yearly = [drifter.monthly_savings(snapshot, 12 * year) for year in range(10)]
        assert all(b < a for a, b in zip(yearly, yearly[1:]))

    def test_bear_market_lowers_first_year(self):
        """Test that the bear regime shrinks the portfolio in year one."""
        snapshot = FinancialSnapshot(total_assets=100000)
        bear = compute_scenarios(snapshot, years=2, market_weather="bear")[1]
        normal = compute_scenarios(snapshot, years=2, market_weather="normal")[1]

        assert bear.months[12].net_worth < 100000
        assert normal.months[12].net_worth > 100000
        # Year two grows at the baseline again
        assert bear.months[24].net_worth / bear.months[12].net_worth == pytest.approx(
            normal.months[12].net_worth / 100000
        )

    def test_unknown_market_weather(self, sample_snapshot):
        with pytest.raises(UnknownMarketWeatherError):
            compute_scenarios(sample_snapshot, market_weather="sunny")

    def test_to_dataframe(self, sample_snapshot):
        path = compute_scenarios(sample_snapshot, years=1)[1]
        frame = path.to_dataframe()

        assert isinstance(frame, pd.DataFrame)
        assert frame.index.name == "month_index"
        assert len(frame) == 13
        assert frame.loc[0, "net_worth"] == 130000


class TestProjectForward:
    def test_returns_month_points(self, sample_snapshot):
        months = project_forward(sample_snapshot, 24)
        assert len(months) == 25
        assert months[0].net_worth == sample_snapshot.net_worth
        assert months[24].net_worth > months[0].net_worth

    def test_age_unknown_without_fallback(self):
        months = project_forward(FinancialSnapshot(total_assets=0), 3)
        assert all(point.age is None for point in months)

    def test_negative_months_rejected(self, sample_snapshot):
        with pytest.raises(ValueError):
            project_forward(sample_snapshot, -1)
