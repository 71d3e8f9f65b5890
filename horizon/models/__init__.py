"""Projection, resilience and decumulation engine."""

from .age_clock import DEFAULT_FALLBACK_AGE, age_at_date, resolve_age
from .decumulation import (
    WithdrawalResult,
    WithdrawalYear,
    compare_withdrawal_strategies,
    compute_withdrawal,
)
from .errors import (
    HorizonError,
    InvalidDateOfBirthError,
    UnknownMarketWeatherError,
    UnknownWithdrawalStrategyError,
)
from .fire_projection import (
    FireProjection,
    FireRange,
    compute_fire_projection,
    compute_fire_range,
    default_retirement_age,
    project_portfolio_at_retirement,
)
from .formatting import CurrencyFormatter, format_countdown, format_fire_age
from .life_events import (
    LIFE_EVENT_CATALOG,
    LifeEvent,
    LifeEventImpact,
    compute_life_event_impact,
)
from .market_weather import (
    DEFAULT_RETURN,
    DEFAULT_VOLATILITY,
    MARKET_WEATHER,
    MarketWeatherRegime,
    get_market_weather,
)
from .monte_carlo import MonteCarloConfig, MonteCarloResult, run_monte_carlo
from .resilience import (
    ResilienceBreakdown,
    ResilienceCalibration,
    ResilienceScore,
    compute_resilience_score,
)
from .scenarios import (
    SCENARIO_PROFILES,
    SWR,
    MonthPoint,
    ScenarioPath,
    ScenarioProfile,
    compute_scenarios,
    project_forward,
)
from .snapshot import FinancialSnapshot
from .state_pension import NL_AOW_AGE, NL_AOW_MONTHLY, StatePension
from .withdrawal_rules import (
    INFLATION,
    DecumulationAssumptions,
    WithdrawalPolicy,
    WithdrawalStrategy,
    create_withdrawal_policy,
)

__all__ = [
    "DEFAULT_FALLBACK_AGE",
    "age_at_date",
    "resolve_age",
    "WithdrawalResult",
    "WithdrawalYear",
    "compare_withdrawal_strategies",
    "compute_withdrawal",
    "HorizonError",
    "InvalidDateOfBirthError",
    "UnknownMarketWeatherError",
    "UnknownWithdrawalStrategyError",
    "FireProjection",
    "FireRange",
    "compute_fire_projection",
    "compute_fire_range",
    "default_retirement_age",
    "project_portfolio_at_retirement",
    "CurrencyFormatter",
    "format_countdown",
    "format_fire_age",
    "LIFE_EVENT_CATALOG",
    "LifeEvent",
    "LifeEventImpact",
    "compute_life_event_impact",
    "DEFAULT_RETURN",
    "DEFAULT_VOLATILITY",
    "MARKET_WEATHER",
    "MarketWeatherRegime",
    "get_market_weather",
    "MonteCarloConfig",
    "MonteCarloResult",
    "run_monte_carlo",
    "ResilienceBreakdown",
    "ResilienceCalibration",
    "ResilienceScore",
    "compute_resilience_score",
    "SCENARIO_PROFILES",
    "SWR",
    "MonthPoint",
    "ScenarioPath",
    "ScenarioProfile",
    "compute_scenarios",
    "project_forward",
    "FinancialSnapshot",
    "NL_AOW_AGE",
    "NL_AOW_MONTHLY",
    "StatePension",
    "INFLATION",
    "DecumulationAssumptions",
    "WithdrawalPolicy",
    "WithdrawalStrategy",
    "create_withdrawal_policy",
]
