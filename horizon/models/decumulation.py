"""
Decumulation simulator.

Simulates year-by-year portfolio drawdown from retirement to a target age
under a selected withdrawal policy, offsetting the need with the AOW state
pension and tracking when (if ever) the portfolio runs out.
"""

import logging
from typing import Dict, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from .withdrawal_rules import (
    WITHDRAWAL_POLICIES,
    DecumulationAssumptions,
    WithdrawalStrategy,
    YearState,
    create_withdrawal_policy,
)

logger = logging.getLogger(__name__)

# Balances below half a cent count as depleted
DEPLETION_EPSILON = 0.005


class WithdrawalYear(BaseModel):
    """One row of the drawdown schedule."""

    model_config = ConfigDict(frozen=True)

    age: float = Field(..., description="Age at the start of the year")
    year_index: int = Field(..., ge=0, description="Years since retirement")
    start_balance: float = Field(..., ge=0)
    withdrawal: float = Field(..., ge=0)
    aow_income: float = Field(..., ge=0)
    needed_from_portfolio: float = Field(..., ge=0)
    growth: float = Field(...)
    end_balance: float = Field(..., ge=0)

    # Bucket strategy only
    cash_balance: Optional[float] = None
    bond_balance: Optional[float] = None
    stock_balance: Optional[float] = None
    refilled: Optional[bool] = None


class WithdrawalResult(BaseModel):
    """Result of a drawdown simulation."""

    model_config = ConfigDict(frozen=True)

    strategy: WithdrawalStrategy = Field(..., description="Policy used")
    monthly_withdrawal: float = Field(
        ..., ge=0, description="First-year withdrawal divided by 12"
    )
    yearly_sustainable: float = Field(..., ge=0, description="First-year withdrawal")
    depleted: bool = Field(..., description="Portfolio ran out before the target age")
    success_years: int = Field(..., ge=0, description="Fully funded years")
    total_years: int = Field(..., ge=0, description="Requested drawdown span")
    depletion_age: Optional[float] = Field(
        default=None, description="Age in the year the portfolio ran out"
    )
    schedule: List[WithdrawalYear] = Field(default_factory=list)

    @property
    def final_balance(self) -> float:
        return self.schedule[-1].end_balance if self.schedule else 0.0

    @property
    def total_withdrawn(self) -> float:
        return sum(row.withdrawal for row in self.schedule)

    @property
    def total_aow_income(self) -> float:
        return sum(row.aow_income for row in self.schedule)

    def to_dataframe(self) -> pd.DataFrame:
        """Schedule as a DataFrame indexed by age, for tabular display."""
        columns = list(WithdrawalYear.model_fields)
        frame = pd.DataFrame(
            [row.model_dump() for row in self.schedule], columns=columns
        )
        if self.strategy != "bucket":
            frame = frame.drop(
                columns=["cash_balance", "bond_balance", "stock_balance", "refilled"]
            )
        return frame.set_index("age")


def compute_withdrawal(
    starting_portfolio: float,
    retirement_age: float,
    target_age: float,
    strategy: str,
    yearly_expenses: float,
    assumptions: Optional[DecumulationAssumptions] = None,
) -> WithdrawalResult:
    """
    Simulate drawdown from retirement_age up to target_age.

    Args:
        starting_portfolio: Portfolio value at retirement (negative clamps to 0)
        retirement_age: Age at which withdrawals start
        target_age: Age the portfolio should last until
        strategy: Withdrawal strategy name
        yearly_expenses: Yearly spending need in today's money
        assumptions: Drawdown assumptions (defaults apply when None)

    Returns:
        WithdrawalResult with one schedule row per year

    Raises:
        UnknownWithdrawalStrategyError: If the strategy is not recognised
    """
    assumptions = assumptions or DecumulationAssumptions()
    starting_portfolio = max(0.0, starting_portfolio)
    yearly_expenses = max(0.0, yearly_expenses)
    policy = create_withdrawal_policy(strategy, starting_portfolio, assumptions)

    total_years = int(target_age - retirement_age)
    if total_years <= 0:
        return WithdrawalResult(
            strategy=policy.name,
            monthly_withdrawal=0.0,
            yearly_sustainable=0.0,
            depleted=False,
            success_years=0,
            total_years=0,
        )

    pension = assumptions.state_pension
    schedule: List[WithdrawalYear] = []
    balance = starting_portfolio
    depletion_year: Optional[int] = None
    state = None

    for year_index in range(total_years):
        age = retirement_age + year_index
        inflation_factor = assumptions.inflation_factor(year_index)
        aow_income = pension.yearly_income(age)
        needed = max(0.0, yearly_expenses * inflation_factor - aow_income)

        if state is None:
            state = policy.initial_state(needed)

        year = YearState(
            year_index=year_index,
            age=age,
            start_balance=balance,
            needed_from_portfolio=needed,
            inflation_factor=inflation_factor,
        )
        requested, state = policy.step(year, state)
        withdrawal = max(0.0, min(requested, balance))
        growth, state = policy.settle(year, withdrawal, state)

        end_balance = balance - withdrawal + growth
        if end_balance < DEPLETION_EPSILON:
            end_balance = 0.0
            if depletion_year is None:
                depletion_year = year_index
                logger.debug(
                    f"{policy.name} portfolio depleted at age {age} "
                    f"(year {year_index + 1} of {total_years})"
                )

        bucket_fields: Dict[str, object] = {}
        if policy.name == "bucket":
            bucket_fields = {
                "cash_balance": state.cash,
                "bond_balance": state.bonds,
                "stock_balance": state.stocks,
                "refilled": state.refilled,
            }

        schedule.append(
            WithdrawalYear(
                age=age,
                year_index=year_index,
                start_balance=balance,
                withdrawal=withdrawal,
                aow_income=aow_income,
                needed_from_portfolio=needed,
                growth=end_balance - balance + withdrawal,
                end_balance=end_balance,
                **bucket_fields,
            )
        )
        balance = end_balance

    depleted = depletion_year is not None
    first_withdrawal = schedule[0].withdrawal

    return WithdrawalResult(
        strategy=policy.name,
        monthly_withdrawal=first_withdrawal / 12,
        yearly_sustainable=first_withdrawal,
        depleted=depleted,
        success_years=depletion_year if depleted else total_years,
        total_years=total_years,
        depletion_age=retirement_age + depletion_year if depleted else None,
        schedule=schedule,
    )


def compare_withdrawal_strategies(
    starting_portfolio: float,
    retirement_age: float,
    target_age: float,
    yearly_expenses: float,
    assumptions: Optional[DecumulationAssumptions] = None,
) -> Dict[str, WithdrawalResult]:
    """
    Run every withdrawal strategy on the same inputs.

    Returns:
        Dictionary mapping strategy name to its WithdrawalResult
    """
    return {
        strategy: compute_withdrawal(
            starting_portfolio,
            retirement_age,
            target_age,
            strategy,
            yearly_expenses,
            assumptions,
        )
        for strategy in WITHDRAWAL_POLICIES
    }
