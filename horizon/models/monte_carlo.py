"""
Monte Carlo net worth projection.

Runs many yearly accumulation paths with normally distributed returns to show
the spread around the deterministic projection: percentile bands per year and
the distribution of FIRE ages.
"""

from typing import Dict, List, Optional

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field

from .age_clock import resolve_age
from .market_weather import (
    DEFAULT_MARKET_WEATHER,
    DEFAULT_RETURN,
    DEFAULT_VOLATILITY,
    get_market_weather,
)
from .scenarios import fire_target_for
from .snapshot import FinancialSnapshot

DEFAULT_SIMULATIONS = 1000
DEFAULT_SEED = 42
MAX_MONTE_CARLO_YEARS = 60
PERCENTILE_LEVELS = (10, 25, 50, 75, 90)


class MonteCarloConfig(BaseModel):
    """Configuration for a Monte Carlo projection."""

    model_config = ConfigDict(frozen=True)

    simulations: int = Field(
        default=DEFAULT_SIMULATIONS, ge=1, le=100000, description="Number of paths"
    )
    years: int = Field(
        default=40, ge=1, le=MAX_MONTE_CARLO_YEARS, description="Years to simulate"
    )
    market_weather: str = Field(default=DEFAULT_MARKET_WEATHER)
    annual_return: float = Field(default=DEFAULT_RETURN, ge=-0.5, le=0.5)
    volatility: float = Field(default=DEFAULT_VOLATILITY, ge=0, le=1)
    seed: Optional[int] = Field(
        default=DEFAULT_SEED, ge=0, description="Random seed for reproducibility"
    )


class MonteCarloResult(BaseModel):
    """Percentile bands and FIRE-age distribution of a Monte Carlo run."""

    model_config = ConfigDict(frozen=True)

    simulations: int
    years: int
    percentiles: Dict[str, List[float]] = Field(
        ..., description="Net worth per year for p10, p25, p50, p75, p90"
    )
    fire_ages: List[float] = Field(
        default_factory=list, description="Sorted FIRE ages of paths that reached it"
    )
    fire_probability: float = Field(..., ge=0, le=1)
    p10_fire_age: Optional[float] = None
    p50_fire_age: Optional[float] = None
    p90_fire_age: Optional[float] = None


def generate_annual_returns(
    config: MonteCarloConfig, rng: np.random.Generator
) -> NDArray[np.float64]:
    """
    Draw annual returns for every path.

    Returns:
        Array of shape (years, simulations)
    """
    regime = get_market_weather(config.market_weather)
    mean = regime.annual_return(config.annual_return)
    volatility = regime.volatility(config.volatility)

    returns = rng.normal(mean, volatility, size=(config.years, config.simulations))
    if regime.first_year_return is not None:
        returns[0, :] = rng.normal(
            regime.first_year_return, volatility, size=config.simulations
        )
    # A year can at worst wipe out the portfolio
    return np.maximum(returns, -1.0)


def _nth_sorted(values: NDArray[np.float64], fraction: float) -> Optional[float]:
    if values.size == 0:
        return None
    return float(values[int(np.floor(values.size * fraction))])


def run_monte_carlo(
    snapshot: FinancialSnapshot,
    config: Optional[MonteCarloConfig] = None,
    fallback_age: Optional[float] = None,
) -> MonteCarloResult:
    """
    Simulate yearly net worth paths with random returns.

    Args:
        snapshot: Starting financial position
        config: Simulation configuration (defaults apply when None)
        fallback_age: Age used when the snapshot has no date of birth; FIRE
            ages are reported as years from now when no age is known

    Returns:
        MonteCarloResult with percentile bands and FIRE ages

    Raises:
        UnknownMarketWeatherError: If the configured regime is not known
    """
    config = config or MonteCarloConfig()
    rng = np.random.default_rng(config.seed)
    returns = generate_annual_returns(config, rng)

    fire_target = fire_target_for(snapshot.monthly_expenses)
    current_age = resolve_age(snapshot.date_of_birth, fallback_age)
    yearly_savings = snapshot.monthly_savings * 12

    balances = np.zeros((config.years + 1, config.simulations))
    balances[0, :] = snapshot.net_worth
    fire_years = np.full(config.simulations, -1, dtype=np.int32)

    for year in range(1, config.years + 1):
        balances[year, :] = np.maximum(
            0.0, balances[year - 1, :] * (1 + returns[year - 1, :]) + yearly_savings
        )
        if fire_target is not None:
            newly_fired = (fire_years == -1) & (balances[year, :] >= fire_target)
            fire_years[newly_fired] = year

    percentiles = {
        f"p{level}": np.round(np.percentile(balances, level, axis=1)).tolist()
        for level in PERCENTILE_LEVELS
    }

    reached = np.sort(fire_years[fire_years != -1]).astype(np.float64)
    if current_age is not None:
        reached = reached + current_age

    return MonteCarloResult(
        simulations=config.simulations,
        years=config.years,
        percentiles=percentiles,
        fire_ages=reached.tolist(),
        fire_probability=float(np.mean(fire_years != -1)),
        p10_fire_age=_nth_sorted(reached, 0.10),
        p50_fire_age=_nth_sorted(reached, 0.50),
        p90_fire_age=_nth_sorted(reached, 0.90),
    )
