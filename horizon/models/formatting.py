"""
Display formatting helpers for projection results.

Formats FIRE ages, countdowns and euro amounts the way the presentation layer
shows them.
"""

import math
from typing import Optional

from pydantic import BaseModel, Field

NEVER_LABEL = "Nooit / 67+"
REACHED_LABEL = "Bereikt!"


def format_fire_age(age: Optional[float]) -> str:
    """
    Format a FIRE age for display.

    Args:
        age: Fractional age, or None when FIRE is never reached

    Returns:
        "Nooit / 67+" for None, otherwise e.g. "47 jaar en 3 mnd"
    """
    if age is None or math.isnan(age):
        return NEVER_LABEL

    years = math.floor(age)
    months = round((age - years) * 12)
    if months == 12:
        years += 1
        months = 0
    return f"{years} jaar en {months} mnd" if months > 0 else f"{years} jaar"


def format_countdown(days: int) -> str:
    """Format a countdown in days as years and months."""
    if days <= 0:
        return REACHED_LABEL
    years = days // 365
    months = (days % 365) // 30
    if years > 0 and months > 0:
        return f"{years}j {months}mnd"
    if years > 0:
        return f"{years}j"
    return f"{months}mnd"


class CurrencyFormatter(BaseModel):
    """Formats currency and percentage values for display."""

    currency_symbol: str = Field(default="€", description="Currency symbol")
    decimal_places: int = Field(
        default=0, ge=0, le=10, description="Number of decimal places"
    )
    thousands_separator: str = Field(default=".", description="Thousands separator")
    decimal_separator: str = Field(default=",", description="Decimal separator")

    def format_currency(self, amount: float) -> str:
        """
        Format a currency amount, e.g. "€ 750.000".

        Args:
            amount: The amount to format

        Returns:
            Formatted currency string
        """
        formatted = f"{abs(amount):,.{self.decimal_places}f}"
        # Swap the separators from the "1,234.5" default
        formatted = (
            formatted.replace(",", "\0")
            .replace(".", self.decimal_separator)
            .replace("\0", self.thousands_separator)
        )
        sign = "-" if amount < 0 else ""
        return f"{sign}{self.currency_symbol} {formatted}"

    def format_percentage(self, rate: float, decimal_places: int = 1) -> str:
        """Format a decimal rate as a percentage, e.g. 0.04 -> "4,0%"."""
        percentage = f"{rate * 100:.{decimal_places}f}"
        return f"{percentage.replace('.', self.decimal_separator)}%"
