"""
Behavioural scenario projections.

This module projects net worth month by month for three behavioural profiles
(drifter, current, optimizer). The profiles are rows in a parameter table that
all run through the same stepping loop, which is also reused by the FIRE
projection and forward projections.
"""

from typing import Dict, List, Literal, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from .age_clock import DEFAULT_FALLBACK_AGE, resolve_age
from .market_weather import (
    DEFAULT_MARKET_WEATHER,
    DEFAULT_RETURN,
    MarketWeatherRegime,
    get_market_weather,
)
from .snapshot import FinancialSnapshot

SWR = 0.04
MAX_SCENARIO_YEARS = 40

ScenarioName = Literal["drifter", "current", "optimizer"]


class ScenarioProfile(BaseModel):
    """Parameter deltas describing one behavioural profile."""

    model_config = ConfigDict(frozen=True)

    name: ScenarioName = Field(..., description="Profile key")
    label: str = Field(..., description="Display label")
    expense_growth: float = Field(
        default=0.0, description="Annual growth of monthly expenses"
    )
    expense_multiplier: float = Field(
        default=1.0, gt=0, description="Expense change applied from month 0"
    )
    contribution_multiplier: float = Field(
        default=1.0, ge=0, description="Contribution change applied from month 0"
    )
    savings_erosion: float = Field(
        default=0.0,
        ge=0,
        lt=1,
        description="Yearly decline of a positive savings surplus",
    )
    spends_returns_in_deficit: bool = Field(
        default=False,
        description="Investment returns cover a savings deficit instead of compounding",
    )

    def monthly_expenses(self, snapshot: FinancialSnapshot, month_index: int) -> float:
        """Monthly expenses in effect during a given month."""
        years_elapsed = month_index // 12
        return (
            snapshot.monthly_expenses
            * self.expense_multiplier
            * (1 + self.expense_growth) ** years_elapsed
        )

    def monthly_savings(self, snapshot: FinancialSnapshot, month_index: int) -> float:
        """Net amount added to net worth during a given month."""
        surplus = snapshot.monthly_income - self.monthly_expenses(snapshot, month_index)
        if surplus > 0:
            surplus *= (1 - self.savings_erosion) ** (month_index // 12)
        extra_contributions = snapshot.monthly_contributions * (
            self.contribution_multiplier - 1
        )
        return surplus + extra_contributions

    def in_deficit(self, snapshot: FinancialSnapshot, month_index: int) -> bool:
        """Whether the profile is living off its portfolio during a given month."""
        return (
            self.spends_returns_in_deficit
            and self.monthly_savings(snapshot, month_index) <= 0
        )


SCENARIO_PROFILES: Dict[str, ScenarioProfile] = {
    "drifter": ScenarioProfile(
        name="drifter",
        label="Drifter",
        expense_growth=0.03,
        savings_erosion=0.02,
        spends_returns_in_deficit=True,
    ),
    "current": ScenarioProfile(name="current", label="Huidige Koers"),
    "optimizer": ScenarioProfile(
        name="optimizer",
        label="Optimizer",
        expense_multiplier=0.9,
        contribution_multiplier=1.2,
    ),
}


class MonthPoint(BaseModel):
    """Net worth at the start of one projected month."""

    model_config = ConfigDict(frozen=True)

    month_index: int = Field(..., ge=0, description="Months from now")
    net_worth: float = Field(..., description="Projected net worth")
    age: Optional[float] = Field(default=None, description="Age at this month")
    monthly_expenses: float = Field(default=0.0, description="Expenses this month")
    savings: float = Field(
        default=0.0, description="Savings added during the preceding month"
    )
    growth: float = Field(
        default=0.0, description="Investment growth during the preceding month"
    )
    fire_target: Optional[float] = Field(
        default=None, description="Net worth needed for FIRE at this month"
    )
    passive_income: float = Field(
        default=0.0, description="Monthly income the net worth supports at the SWR"
    )


class ScenarioPath(BaseModel):
    """Projected trajectory for one behavioural profile."""

    model_config = ConfigDict(frozen=True)

    name: ScenarioName = Field(..., description="Profile key")
    label: str = Field(..., description="Display label")
    months: List[MonthPoint] = Field(..., description="One point per month")
    fire_age: Optional[float] = Field(
        default=None, description="Age when FIRE is first reached"
    )
    fire_month: Optional[int] = Field(
        default=None, description="Month index when FIRE is first reached"
    )

    @property
    def final_net_worth(self) -> float:
        return self.months[-1].net_worth

    def to_dataframe(self) -> pd.DataFrame:
        """Month points as a DataFrame indexed by month_index."""
        frame = pd.DataFrame([point.model_dump() for point in self.months])
        return frame.set_index("month_index")


def fire_target_for(monthly_expenses: float, swr: float = SWR) -> Optional[float]:
    """Net worth that sustains the given expenses at the SWR, None if undefined."""
    if monthly_expenses <= 0:
        return None
    return monthly_expenses * 12 / swr


def simulate_profile(
    snapshot: FinancialSnapshot,
    profile: ScenarioProfile,
    months: int,
    regime: Optional[MarketWeatherRegime] = None,
    annual_return: float = DEFAULT_RETURN,
    current_age: Optional[float] = None,
    stop_at_fire: bool = False,
) -> ScenarioPath:
    """
    Step one profile forward month by month.

    Args:
        snapshot: Starting financial position
        profile: Behavioural profile to apply
        months: Number of monthly steps
        regime: Market weather regime (defaults to "normal")
        annual_return: Baseline annual return before regime adjustments
        current_age: Age at month 0, or None when unknown
        stop_at_fire: Stop once FIRE is reached

    Returns:
        ScenarioPath with months 0..months inclusive (fewer when stopping early)
    """
    regime = regime or get_market_weather(DEFAULT_MARKET_WEATHER)

    net_worth = snapshot.net_worth
    points: List[MonthPoint] = []
    fire_month: Optional[int] = None
    fire_age: Optional[float] = None
    savings = 0.0
    growth = 0.0

    for month in range(months + 1):
        age = current_age + month / 12 if current_age is not None else None
        expenses = profile.monthly_expenses(snapshot, month)
        fire_target = fire_target_for(expenses)

        points.append(
            MonthPoint(
                month_index=month,
                net_worth=net_worth,
                age=age,
                monthly_expenses=expenses,
                savings=savings,
                growth=growth,
                fire_target=fire_target,
                passive_income=net_worth * SWR / 12,
            )
        )

        deficit = profile.in_deficit(snapshot, month)
        if (
            fire_month is None
            and fire_target is not None
            and net_worth >= fire_target
            and not deficit
        ):
            fire_month = month
            fire_age = age
            if stop_at_fire:
                break

        if month < months:
            monthly_return = regime.annual_return_for_month(month, annual_return) / 12
            growth = net_worth * monthly_return
            savings = profile.monthly_savings(snapshot, month)
            if deficit:
                # Returns are spent on the shortfall, never reinvested
                growth = min(growth, -savings)
            net_worth = net_worth + growth + savings

    return ScenarioPath(
        name=profile.name,
        label=profile.label,
        months=points,
        fire_age=fire_age,
        fire_month=fire_month,
    )


def compute_scenarios(
    snapshot: FinancialSnapshot,
    years: int = MAX_SCENARIO_YEARS,
    market_weather: str = DEFAULT_MARKET_WEATHER,
    annual_return: float = DEFAULT_RETURN,
    fallback_age: Optional[float] = DEFAULT_FALLBACK_AGE,
) -> List[ScenarioPath]:
    """
    Project the drifter, current and optimizer paths.

    Args:
        snapshot: Starting financial position
        years: Projection horizon in years (0-40)
        market_weather: Market weather regime key
        annual_return: Baseline annual return
        fallback_age: Age used when the snapshot has no date of birth

    Returns:
        One ScenarioPath per profile, in table order

    Raises:
        UnknownMarketWeatherError: If market_weather is not a known regime
        ValueError: If years is outside 0-40
    """
    if not 0 <= years <= MAX_SCENARIO_YEARS:
        raise ValueError(f"years must be between 0 and {MAX_SCENARIO_YEARS}")

    regime = get_market_weather(market_weather)
    current_age = resolve_age(snapshot.date_of_birth, fallback_age)

    return [
        simulate_profile(
            snapshot,
            profile,
            years * 12,
            regime=regime,
            annual_return=annual_return,
            current_age=current_age,
        )
        for profile in SCENARIO_PROFILES.values()
    ]


def project_forward(
    snapshot: FinancialSnapshot,
    months: int,
    annual_return: float = DEFAULT_RETURN,
    fallback_age: Optional[float] = None,
) -> List[MonthPoint]:
    """Month-by-month projection of the current trajectory."""
    if months < 0:
        raise ValueError("months must be non-negative")
    path = simulate_profile(
        snapshot,
        SCENARIO_PROFILES["current"],
        months,
        annual_return=annual_return,
        current_age=resolve_age(snapshot.date_of_birth, fallback_age),
    )
    return path.months
