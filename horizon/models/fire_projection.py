"""
Baseline FIRE projection.

Derives the FIRE age of the current trajectory by running the "current"
scenario profile through the shared stepping loop until age 100, together with
the headline figures shown next to it (freedom percentage, countdown, passive
income and savings rate).
"""

import math
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field

from .age_clock import resolve_age
from .market_weather import DEFAULT_RETURN
from .scenarios import SCENARIO_PROFILES, SWR, fire_target_for, simulate_profile
from .snapshot import FinancialSnapshot

FIRE_HORIZON_AGE = 100
MAX_FIRE_MONTHS = 600
DAYS_PER_MONTH = 30.44

OPTIMISTIC_RETURN = 0.09
PESSIMISTIC_RETURN = 0.04

MIN_RETIREMENT_AGE = 40
DEFAULT_RETIREMENT_AGE = 55


class FireProjection(BaseModel):
    """Baseline FIRE projection for the current trajectory."""

    model_config = ConfigDict(frozen=True)

    fire_target: float = Field(..., ge=0, description="Net worth needed for FIRE")
    net_worth: float = Field(..., description="Current net worth")
    freedom_percentage: float = Field(
        ..., description="Share of the FIRE target already reached (max 100)"
    )
    fire_age: Optional[float] = Field(default=None, description="Projected FIRE age")
    current_age: Optional[float] = Field(default=None, description="Current age")
    months_to_fire: Optional[int] = Field(
        default=None, description="Months until FIRE, None if not reached"
    )
    fire_date: Optional[date] = Field(default=None, description="Projected FIRE date")
    reached: bool = Field(default=False, description="FIRE target already reached")
    countdown_days: int = Field(default=0, ge=0)
    countdown_years: int = Field(default=0, ge=0)
    countdown_months: int = Field(default=0, ge=0)
    freedom_years: int = Field(
        default=0, ge=0, description="Years of expenses covered by net worth"
    )
    freedom_months: int = Field(default=0, ge=0)
    monthly_passive_income: float = Field(default=0.0)
    monthly_savings: float = Field(default=0.0)
    savings_rate: float = Field(default=0.0, description="Savings rate in percent")


class FireRange(BaseModel):
    """FIRE projections under optimistic, expected and pessimistic returns."""

    optimistic: FireProjection
    expected: FireProjection
    pessimistic: FireProjection


def horizon_months(current_age: Optional[float]) -> int:
    """Months until age 100, or 600 when the age is unknown."""
    if current_age is None:
        return MAX_FIRE_MONTHS
    return max(0, math.ceil((FIRE_HORIZON_AGE - current_age) * 12))


def compute_fire_projection(
    snapshot: FinancialSnapshot,
    annual_return: float = DEFAULT_RETURN,
    fallback_age: Optional[float] = None,
    today: Optional[date] = None,
) -> FireProjection:
    """
    Project when the current trajectory reaches financial independence.

    Args:
        snapshot: Starting financial position
        annual_return: Annual return assumption
        fallback_age: Age used when the snapshot has no date of birth; when
            None and no birth date is known, fire_age stays None
        today: Reference date for the FIRE date (defaults to today)

    Returns:
        FireProjection for the current trajectory
    """
    today = today or date.today()
    net_worth = snapshot.net_worth
    fire_target = fire_target_for(snapshot.monthly_expenses) or 0.0
    current_age = resolve_age(snapshot.date_of_birth, fallback_age)

    path = simulate_profile(
        snapshot,
        SCENARIO_PROFILES["current"],
        horizon_months(current_age),
        annual_return=annual_return,
        current_age=current_age,
        stop_at_fire=True,
    )
    months_to_fire = path.fire_month

    yearly_expenses = snapshot.yearly_expenses
    freedom_months_total = (
        max(0.0, net_worth / yearly_expenses * 12) if yearly_expenses > 0 else 0.0
    )
    savings = snapshot.monthly_savings

    countdown = {}
    fire_date = None
    if months_to_fire is not None:
        fire_date = today + relativedelta(months=months_to_fire)
        countdown = {
            "countdown_days": round(months_to_fire * DAYS_PER_MONTH),
            "countdown_years": months_to_fire // 12,
            "countdown_months": months_to_fire % 12,
        }

    return FireProjection(
        fire_target=fire_target,
        net_worth=net_worth,
        freedom_percentage=(
            min(net_worth / fire_target * 100, 100.0) if fire_target > 0 else 0.0
        ),
        fire_age=path.fire_age,
        current_age=current_age,
        months_to_fire=months_to_fire,
        fire_date=fire_date,
        reached=months_to_fire == 0,
        freedom_years=int(freedom_months_total // 12),
        freedom_months=int(freedom_months_total % 12),
        monthly_passive_income=net_worth * SWR / 12,
        monthly_savings=savings,
        savings_rate=(
            savings / snapshot.monthly_income * 100
            if snapshot.monthly_income > 0
            else 0.0
        ),
        **countdown,
    )


def compute_fire_range(
    snapshot: FinancialSnapshot, fallback_age: Optional[float] = None
) -> FireRange:
    """Compute optimistic (9%), expected (7%) and pessimistic (4%) projections."""
    return FireRange(
        optimistic=compute_fire_projection(snapshot, OPTIMISTIC_RETURN, fallback_age),
        expected=compute_fire_projection(snapshot, DEFAULT_RETURN, fallback_age),
        pessimistic=compute_fire_projection(
            snapshot, PESSIMISTIC_RETURN, fallback_age
        ),
    )


def default_retirement_age(
    snapshot: FinancialSnapshot, fallback_age: Optional[float] = None
) -> int:
    """Retirement age seeded from the FIRE age, never below 40."""
    fire_age = compute_fire_projection(snapshot, fallback_age=fallback_age).fire_age
    if fire_age is None:
        return DEFAULT_RETIREMENT_AGE
    return max(MIN_RETIREMENT_AGE, round(fire_age))


def project_portfolio_at_retirement(
    snapshot: FinancialSnapshot,
    retirement_age: float,
    current_age: float,
    annual_return: float = DEFAULT_RETURN,
) -> float:
    """
    Project net worth at retirement along the current trajectory.

    Args:
        snapshot: Starting financial position
        retirement_age: Age at which drawdown starts
        current_age: Age today
        annual_return: Annual return assumption

    Returns:
        Projected portfolio at retirement, clamped at 0
    """
    months = max(0, round((retirement_age - current_age) * 12))
    path = simulate_profile(
        snapshot,
        SCENARIO_PROFILES["current"],
        months,
        annual_return=annual_return,
    )
    return max(0.0, path.final_net_worth)
