"""
Market weather regimes.

A market weather regime biases the baseline return and volatility assumptions
used by the projections. Regimes live in a lookup table so new ones can be
added without touching the simulation loops.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownMarketWeatherError

DEFAULT_RETURN = 0.07
DEFAULT_VOLATILITY = 0.15
DEFAULT_MARKET_WEATHER = "normal"


class MarketWeatherRegime(BaseModel):
    """Return and volatility adjustments for a named market regime."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Regime key")
    label: str = Field(..., description="Display label")
    description: str = Field(..., description="Short description")
    return_adjustment: float = Field(
        default=0.0, description="Added to the baseline annual return"
    )
    volatility_adjustment: float = Field(
        default=0.0, description="Added to the baseline annual volatility"
    )
    first_year_return: Optional[float] = Field(
        default=None, description="Annual return applied during the first year only"
    )

    def annual_return(self, base_return: float = DEFAULT_RETURN) -> float:
        """Steady-state annual return under this regime."""
        return base_return + self.return_adjustment

    def volatility(self, base_volatility: float = DEFAULT_VOLATILITY) -> float:
        return max(0.0, base_volatility + self.volatility_adjustment)

    def annual_return_for_month(
        self, month_index: int, base_return: float = DEFAULT_RETURN
    ) -> float:
        """Annual return rate in effect during a given projection month."""
        if self.first_year_return is not None and month_index < 12:
            return self.first_year_return
        return self.annual_return(base_return)

    def annual_return_for_year(
        self, year_index: int, base_return: float = DEFAULT_RETURN
    ) -> float:
        return self.annual_return_for_month(year_index * 12, base_return)


MARKET_WEATHER: Dict[str, MarketWeatherRegime] = {
    "normal": MarketWeatherRegime(
        key="normal",
        label="Normaal",
        description="Gemiddeld marktrendement",
    ),
    "bull": MarketWeatherRegime(
        key="bull",
        label="Bull markt",
        description="Sterke markt, hoog rendement",
        return_adjustment=0.05,
        volatility_adjustment=-0.03,
    ),
    "bear": MarketWeatherRegime(
        key="bear",
        label="Bear markt",
        description="Crash in jaar 1, daarna herstel",
        volatility_adjustment=0.10,
        first_year_return=-0.20,
    ),
    "stagflation": MarketWeatherRegime(
        key="stagflation",
        label="Stagflatie",
        description="Laag rendement, hoge inflatie",
        return_adjustment=-0.05,
        volatility_adjustment=0.03,
    ),
    "historical": MarketWeatherRegime(
        key="historical",
        label="Historisch",
        description="AEX-achtige patronen",
        return_adjustment=0.01,
        volatility_adjustment=0.02,
    ),
}


def get_market_weather(key: str = DEFAULT_MARKET_WEATHER) -> MarketWeatherRegime:
    """
    Look up a market weather regime.

    Args:
        key: Regime key (e.g. "normal", "bear")

    Returns:
        The matching regime

    Raises:
        UnknownMarketWeatherError: If the key is not in MARKET_WEATHER
    """
    try:
        return MARKET_WEATHER[key]
    except (KeyError, TypeError):
        raise UnknownMarketWeatherError(key, tuple(MARKET_WEATHER)) from None
