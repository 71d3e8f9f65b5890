"""
Exceptions raised by the Horizon engine.

The engine returns structurally valid results for any numerically valid input;
these exceptions only signal caller defects such as unknown enum keys or
malformed dates.
"""


class HorizonError(Exception):
    """Base exception for Horizon engine errors."""


class UnknownWithdrawalStrategyError(HorizonError, ValueError):
    """Raised when a withdrawal strategy key is not recognised."""

    def __init__(self, strategy: str, known: tuple):
        self.strategy = strategy
        super().__init__(
            f"Unknown withdrawal strategy '{strategy}'; expected one of {list(known)}"
        )


class UnknownMarketWeatherError(HorizonError, ValueError):
    """Raised when a market weather regime key is not recognised."""

    def __init__(self, key: str, known: tuple):
        self.key = key
        super().__init__(
            f"Unknown market weather regime '{key}'; expected one of {list(known)}"
        )


class InvalidDateOfBirthError(HorizonError, ValueError):
    """Raised when a date of birth cannot be interpreted."""
