"""
Horizon service coordinating projection requests.

This service sits between the HTTP layer and the pure engine functions. It
applies the caller-side policies the engine leaves open (fallback age,
default retirement age, projected portfolio at retirement) and the configured
assumptions from Settings.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from horizon.config import Settings, get_global_settings
from horizon.models.age_clock import resolve_age
from horizon.models.decumulation import WithdrawalResult, compute_withdrawal
from horizon.models.fire_projection import (
    FireProjection,
    FireRange,
    compute_fire_projection,
    compute_fire_range,
    default_retirement_age,
    project_portfolio_at_retirement,
)
from horizon.models.life_events import (
    LifeEvent,
    LifeEventImpact,
    compute_life_event_impact,
)
from horizon.models.monte_carlo import MonteCarloConfig, MonteCarloResult, run_monte_carlo
from horizon.models.resilience import ResilienceScore, compute_resilience_score
from horizon.models.scenarios import MAX_SCENARIO_YEARS, ScenarioPath, compute_scenarios
from horizon.models.snapshot import FinancialSnapshot
from horizon.models.state_pension import calculate_state_pension_present_value
from horizon.models.withdrawal_rules import WITHDRAWAL_POLICIES, DecumulationAssumptions

DEFAULT_TARGET_AGE = 95


class ScenariosRequest(BaseModel):
    """Request body for scenario projections."""

    snapshot: FinancialSnapshot
    years: int = Field(default=MAX_SCENARIO_YEARS, ge=0, le=MAX_SCENARIO_YEARS)
    market_weather: Optional[str] = None


class SnapshotRequest(BaseModel):
    """Request body carrying only a snapshot."""

    snapshot: FinancialSnapshot


class WithdrawalRequest(BaseModel):
    """Request body for drawdown simulations."""

    snapshot: FinancialSnapshot
    strategy: Optional[str] = None
    retirement_age: Optional[float] = Field(default=None, ge=0, le=120)
    target_age: float = Field(default=DEFAULT_TARGET_AGE, ge=0, le=120)
    starting_portfolio: Optional[float] = None
    yearly_expenses: Optional[float] = Field(default=None, ge=0)


class MonteCarloRequest(BaseModel):
    """Request body for Monte Carlo projections."""

    snapshot: FinancialSnapshot
    simulations: int = Field(default=1000, ge=1)
    years: int = Field(default=40, ge=1, le=60)
    market_weather: Optional[str] = None
    seed: Optional[int] = Field(default=42, ge=0)


class LifeEventImpactRequest(BaseModel):
    """Request body for life event impact."""

    snapshot: FinancialSnapshot
    event: LifeEvent


class WithdrawalPlan(BaseModel):
    """Drawdown result together with the inputs the service resolved."""

    retirement_age: float
    target_age: float
    starting_portfolio: float
    yearly_expenses: float
    aow_present_value: float = Field(
        ..., description="AOW value at retirement, discounted at the portfolio return"
    )
    result: WithdrawalResult


class HorizonService:
    """Service for running Horizon projections with configured assumptions."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the service.

        Args:
            settings: Application settings (global settings when None)
        """
        self.settings = settings or get_global_settings()
        self.logger = logging.getLogger(__name__)

    @property
    def assumptions(self) -> DecumulationAssumptions:
        return DecumulationAssumptions(
            annual_return=self.settings.default_annual_return,
            inflation_rate=self.settings.inflation_rate,
            inflation_indexed=self.settings.withdrawal_inflation_indexed,
        )

    def scenarios(self, request: ScenariosRequest) -> List[ScenarioPath]:
        """Project the three behavioural scenarios."""
        market_weather = request.market_weather or self.settings.default_market_weather
        self.logger.info(
            f"Computing scenarios for {request.years} years ({market_weather})"
        )
        return compute_scenarios(
            request.snapshot,
            years=request.years,
            market_weather=market_weather,
            annual_return=self.settings.default_annual_return,
            fallback_age=self.settings.default_fallback_age,
        )

    def fire_projection(self, snapshot: FinancialSnapshot) -> FireProjection:
        return compute_fire_projection(
            snapshot,
            annual_return=self.settings.default_annual_return,
            fallback_age=self.settings.default_fallback_age,
        )

    def fire_range(self, snapshot: FinancialSnapshot) -> FireRange:
        return compute_fire_range(
            snapshot, fallback_age=self.settings.default_fallback_age
        )

    def resilience(self, snapshot: FinancialSnapshot) -> ResilienceScore:
        return compute_resilience_score(snapshot)

    def withdrawal_plan(
        self, request: WithdrawalRequest, strategy: Optional[str] = None
    ) -> WithdrawalPlan:
        """
        Resolve missing inputs and simulate a drawdown.

        The retirement age defaults to the projected FIRE age, the starting
        portfolio to the current trajectory's net worth at that age and the
        yearly expenses to the snapshot's expenses.

        Args:
            request: Withdrawal request
            strategy: Strategy override (request.strategy when None)

        Returns:
            WithdrawalPlan with the resolved inputs and the result

        Raises:
            UnknownWithdrawalStrategyError: If the strategy is not recognised
        """
        snapshot = request.snapshot
        strategy = strategy or request.strategy or "classic"
        fallback_age = self.settings.default_fallback_age
        annual_return = self.settings.default_annual_return

        retirement_age = request.retirement_age
        if retirement_age is None:
            retirement_age = default_retirement_age(snapshot, fallback_age)

        starting_portfolio = request.starting_portfolio
        if starting_portfolio is None:
            current_age = resolve_age(snapshot.date_of_birth, fallback_age)
            starting_portfolio = project_portfolio_at_retirement(
                snapshot, retirement_age, current_age, annual_return
            )

        yearly_expenses = request.yearly_expenses
        if yearly_expenses is None:
            yearly_expenses = snapshot.yearly_expenses

        assumptions = self.assumptions
        result = compute_withdrawal(
            starting_portfolio,
            retirement_age,
            request.target_age,
            strategy,
            yearly_expenses,
            assumptions,
        )
        if result.depleted:
            self.logger.info(
                f"{strategy} drawdown depleted at age {result.depletion_age} "
                f"(target {request.target_age})"
            )

        return WithdrawalPlan(
            retirement_age=retirement_age,
            target_age=request.target_age,
            starting_portfolio=max(0.0, starting_portfolio),
            yearly_expenses=yearly_expenses,
            aow_present_value=calculate_state_pension_present_value(
                assumptions.state_pension,
                int(retirement_age),
                int(request.target_age),
                annual_return,
            ),
            result=result,
        )

    def compare_withdrawals(self, request: WithdrawalRequest) -> Dict[str, WithdrawalPlan]:
        """Run every withdrawal strategy for the same request."""
        return {
            strategy: self.withdrawal_plan(request, strategy)
            for strategy in WITHDRAWAL_POLICIES
        }

    def monte_carlo(self, request: MonteCarloRequest) -> MonteCarloResult:
        simulations = request.simulations
        max_simulations = self.settings.monte_carlo_max_simulations
        if simulations > max_simulations:
            self.logger.warning(
                f"Requested {simulations} simulations, capping at {max_simulations}"
            )
            simulations = max_simulations

        config = MonteCarloConfig(
            simulations=simulations,
            years=request.years,
            market_weather=request.market_weather
            or self.settings.default_market_weather,
            annual_return=self.settings.default_annual_return,
            seed=request.seed,
        )
        self.logger.info(
            f"Running Monte Carlo with {config.simulations} paths over {config.years} years"
        )
        return run_monte_carlo(
            request.snapshot, config, fallback_age=self.settings.default_fallback_age
        )

    def life_event_impact(self, request: LifeEventImpactRequest) -> LifeEventImpact:
        return compute_life_event_impact(request.snapshot, request.event)
