"""
Withdrawal policies for decumulation planning.

This module provides the withdrawal strategies used after retirement: the
classic 4% rule, a variable percentage of the current balance, Guyton-Klinger
guardrails and a three-bucket (cash/bonds/stocks) strategy. Every policy is a
small state machine behind the same interface, so each can be unit tested on
its own and selected at runtime by name.
"""

from abc import ABC, abstractmethod
from typing import Dict, Literal, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownWithdrawalStrategyError
from .market_weather import DEFAULT_RETURN
from .state_pension import StatePension

INFLATION = 0.02
WITHDRAWAL_RATE = 0.04

WithdrawalStrategy = Literal["classic", "variable", "guardrails", "bucket"]


class DecumulationAssumptions(BaseModel):
    """Economic assumptions and policy parameters for a drawdown simulation."""

    model_config = ConfigDict(frozen=True)

    annual_return: float = Field(
        default=DEFAULT_RETURN, ge=-0.5, le=0.5, description="Portfolio annual return"
    )
    inflation_rate: float = Field(
        default=INFLATION, ge=0, le=0.2, description="Annual inflation rate"
    )
    inflation_indexed: bool = Field(
        default=True,
        description="Index expenses and fixed withdrawals for inflation",
    )
    withdrawal_rate: float = Field(
        default=WITHDRAWAL_RATE, gt=0, le=1, description="Initial withdrawal rate"
    )
    state_pension: StatePension = Field(
        default_factory=StatePension, description="AOW entitlement"
    )

    # Guyton-Klinger guardrails
    guardrail_upper_ratio: float = Field(
        default=1.2, gt=1, description="Balance ratio above which spending rises"
    )
    guardrail_lower_ratio: float = Field(
        default=0.8, gt=0, lt=1, description="Balance ratio below which spending falls"
    )
    guardrail_adjustment: float = Field(
        default=0.10, gt=0, lt=1, description="Size of a guardrail adjustment"
    )
    guardrail_ceiling: float = Field(
        default=1.2, ge=1, description="Max real withdrawal relative to baseline"
    )
    guardrail_floor: float = Field(
        default=0.8, gt=0, le=1, description="Min real withdrawal relative to baseline"
    )

    # Bucket strategy
    bucket_cash_years: float = Field(
        default=3, ge=0, description="Years of need held in cash"
    )
    bucket_bond_years: float = Field(
        default=7, ge=0, description="Years of need held in bonds after the cash years"
    )
    bucket_cash_return: float = Field(default=0.0, description="Cash bucket return")
    bucket_bond_return: float = Field(default=0.03, description="Bond bucket return")
    bucket_stock_return: Optional[float] = Field(
        default=None, description="Stock bucket return (defaults to annual_return)"
    )

    def inflation_factor(self, year_index: int) -> float:
        """Cumulative inflation factor for a year of the drawdown."""
        if not self.inflation_indexed:
            return 1.0
        return (1 + self.inflation_rate) ** year_index

    @property
    def stock_return(self) -> float:
        if self.bucket_stock_return is not None:
            return self.bucket_stock_return
        return self.annual_return


class YearState(BaseModel):
    """Inputs a policy sees at the start of one drawdown year."""

    model_config = ConfigDict(frozen=True)

    year_index: int = Field(..., ge=0)
    age: float = Field(...)
    start_balance: float = Field(..., ge=0)
    needed_from_portfolio: float = Field(..., ge=0)
    inflation_factor: float = Field(default=1.0, gt=0)


class PolicyState(BaseModel):
    """State a policy carries from one year to the next."""

    model_config = ConfigDict(frozen=True)

    # Guardrails: last withdrawal in year-0 money
    real_withdrawal: Optional[float] = None

    # Bucket sub-balances
    cash: float = 0.0
    bonds: float = 0.0
    stocks: float = 0.0
    refilled: bool = False


class WithdrawalPolicy(ABC):
    """Abstract base class for withdrawal policies."""

    name: str = ""

    def __init__(self, initial_portfolio: float, assumptions: DecumulationAssumptions):
        """Initialize the policy.

        Args:
            initial_portfolio: Portfolio value at retirement
            assumptions: Drawdown assumptions
        """
        self.initial_portfolio = max(0.0, initial_portfolio)
        self.assumptions = assumptions

    @property
    def baseline_withdrawal(self) -> float:
        """First-year withdrawal at the initial withdrawal rate."""
        return self.initial_portfolio * self.assumptions.withdrawal_rate

    def initial_state(self, first_year_need: float) -> PolicyState:
        """State before the first year."""
        return PolicyState()

    @abstractmethod
    def step(self, year: YearState, state: PolicyState) -> Tuple[float, PolicyState]:
        """
        Decide the withdrawal the policy asks for this year.

        Args:
            year: Inputs for the current year
            state: State carried over from the previous year

        Returns:
            Tuple of (requested withdrawal, new state)
        """

    def settle(
        self, year: YearState, withdrawal: float, state: PolicyState
    ) -> Tuple[float, PolicyState]:
        """
        Take the withdrawal and apply a year of growth to what remains.

        Args:
            year: Inputs for the current year
            withdrawal: Actual withdrawal after caps
            state: State returned by step

        Returns:
            Tuple of (growth, new state)
        """
        growth = (year.start_balance - withdrawal) * self.assumptions.annual_return
        return growth, state


class ClassicWithdrawalPolicy(WithdrawalPolicy):
    """4% of the initial portfolio, indexed for inflation."""

    name = "classic"

    def step(self, year: YearState, state: PolicyState) -> Tuple[float, PolicyState]:
        return self.baseline_withdrawal * year.inflation_factor, state


class VariableWithdrawalPolicy(WithdrawalPolicy):
    """4% of the current balance each year."""

    name = "variable"

    def step(self, year: YearState, state: PolicyState) -> Tuple[float, PolicyState]:
        return year.start_balance * self.assumptions.withdrawal_rate, state


class GuardrailsWithdrawalPolicy(WithdrawalPolicy):
    """
    Guyton-Klinger guardrails.

    Spending starts at the baseline and follows inflation. When the balance
    drifts above 120% of the inflation-adjusted initial portfolio spending is
    raised 10%, below 80% it is cut 10%. The real withdrawal never leaves the
    [floor, ceiling] band around the baseline.
    """

    name = "guardrails"

    def balance_ratio(self, year: YearState) -> float:
        """Current balance relative to the inflation-adjusted initial portfolio."""
        adjusted_initial = self.initial_portfolio * year.inflation_factor
        if adjusted_initial <= 0:
            return 1.0
        return year.start_balance / adjusted_initial

    def step(self, year: YearState, state: PolicyState) -> Tuple[float, PolicyState]:
        a = self.assumptions
        baseline = self.baseline_withdrawal

        if state.real_withdrawal is None:
            real = baseline
        else:
            real = state.real_withdrawal
            ratio = self.balance_ratio(year)
            if ratio > a.guardrail_upper_ratio:
                real *= 1 + a.guardrail_adjustment
            elif ratio < a.guardrail_lower_ratio:
                real *= 1 - a.guardrail_adjustment

        real = min(max(real, baseline * a.guardrail_floor), baseline * a.guardrail_ceiling)
        new_state = state.model_copy(update={"real_withdrawal": real})
        return real * year.inflation_factor, new_state


def _take(available: float, amount: float) -> Tuple[float, float]:
    """Move up to amount out of available; returns (moved, remaining)."""
    moved = min(max(0.0, available), max(0.0, amount))
    return moved, available - moved


class BucketWithdrawalPolicy(WithdrawalPolicy):
    """
    Three-bucket strategy.

    Cash holds the next 3 years of need, bonds the following 7 years and stocks
    the rest. The yearly need is always paid out of cash; after growth, cash is
    refilled to its target from bonds (then stocks) and bonds from stocks.
    """

    name = "bucket"

    def targets(self, yearly_need: float) -> Tuple[float, float]:
        """Cash and bond targets for a yearly need."""
        a = self.assumptions
        return yearly_need * a.bucket_cash_years, yearly_need * a.bucket_bond_years

    def initial_state(self, first_year_need: float) -> PolicyState:
        cash_target, bond_target = self.targets(first_year_need)
        cash, rest = _take(self.initial_portfolio, cash_target)
        bonds, stocks = _take(rest, bond_target)
        return PolicyState(cash=cash, bonds=bonds, stocks=stocks)

    def step(self, year: YearState, state: PolicyState) -> Tuple[float, PolicyState]:
        return year.needed_from_portfolio, state

    def settle(
        self, year: YearState, withdrawal: float, state: PolicyState
    ) -> Tuple[float, PolicyState]:
        a = self.assumptions
        cash, bonds, stocks = state.cash, state.bonds, state.stocks
        refilled = False

        # Cash must cover the draw
        if cash < withdrawal:
            moved, bonds = _take(bonds, withdrawal - cash)
            cash += moved
            moved, stocks = _take(stocks, withdrawal - cash)
            cash += moved
            refilled = True
        cash = max(0.0, cash - withdrawal)

        cash_growth = cash * a.bucket_cash_return
        bond_growth = bonds * a.bucket_bond_return
        stock_growth = stocks * a.stock_return
        cash += cash_growth
        bonds += bond_growth
        stocks += stock_growth

        cash_target, bond_target = self.targets(year.needed_from_portfolio)
        if cash < cash_target:
            moved_bonds, bonds = _take(bonds, cash_target - cash)
            moved_stocks, stocks = _take(stocks, cash_target - cash - moved_bonds)
            cash += moved_bonds + moved_stocks
            refilled = refilled or (moved_bonds + moved_stocks) > 0
        if bonds < bond_target:
            moved, stocks = _take(stocks, bond_target - bonds)
            bonds += moved

        new_state = PolicyState(
            cash=cash, bonds=bonds, stocks=stocks, refilled=refilled
        )
        return cash_growth + bond_growth + stock_growth, new_state


WITHDRAWAL_POLICIES: Dict[str, Type[WithdrawalPolicy]] = {
    "classic": ClassicWithdrawalPolicy,
    "variable": VariableWithdrawalPolicy,
    "guardrails": GuardrailsWithdrawalPolicy,
    "bucket": BucketWithdrawalPolicy,
}


def create_withdrawal_policy(
    strategy: str,
    initial_portfolio: float,
    assumptions: Optional[DecumulationAssumptions] = None,
) -> WithdrawalPolicy:
    """
    Create a withdrawal policy by strategy name.

    Args:
        strategy: One of "classic", "variable", "guardrails", "bucket"
        initial_portfolio: Portfolio value at retirement
        assumptions: Drawdown assumptions (defaults apply when None)

    Returns:
        Configured WithdrawalPolicy

    Raises:
        UnknownWithdrawalStrategyError: If the strategy is not recognised
    """
    try:
        policy_cls = WITHDRAWAL_POLICIES[strategy]
    except (KeyError, TypeError):
        raise UnknownWithdrawalStrategyError(
            strategy, tuple(WITHDRAWAL_POLICIES)
        ) from None
    return policy_cls(initial_portfolio, assumptions or DecumulationAssumptions())
