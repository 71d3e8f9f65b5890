"""
Financial snapshot model.

The snapshot is the single input shared by every projection in the engine. It
is assembled by the data layer from account, transaction and profile records
and is never mutated by the engine.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .age_clock import parse_date


class FinancialSnapshot(BaseModel):
    """Household balances and monthly cash flows at a point in time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_assets: float = Field(..., ge=0, description="Sum of all asset balances")
    total_debts: float = Field(default=0.0, ge=0, description="Sum of all debts")
    monthly_income: float = Field(default=0.0, ge=0, description="Net monthly income")
    monthly_expenses: float = Field(
        default=0.0, ge=0, description="Average monthly expenses"
    )
    monthly_contributions: float = Field(
        default=0.0, ge=0, description="Monthly contributions into assets"
    )
    yearly_must_expenses: float = Field(
        default=0.0, ge=0, description="Unavoidable yearly expenses"
    )
    date_of_birth: Optional[date] = Field(
        default=None, description="Date of birth (ISO date)"
    )
    liquid_assets: Optional[float] = Field(
        default=None,
        ge=0,
        description="Cash and savings part of total_assets (estimated when absent)",
    )

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def parse_date_of_birth(cls, v):
        """Accept ISO strings and datetimes; reject anything unparseable."""
        if v is None or v == "":
            return None
        return parse_date(v)

    @model_validator(mode="after")
    def validate_liquid_assets(self):
        if self.liquid_assets is not None and self.liquid_assets > self.total_assets:
            raise ValueError("liquid_assets cannot exceed total_assets")
        return self

    @property
    def net_worth(self) -> float:
        """Assets minus debts; may be negative."""
        return self.total_assets - self.total_debts

    @property
    def monthly_savings(self) -> float:
        """Income minus expenses; negative when spending exceeds income."""
        return self.monthly_income - self.monthly_expenses

    @property
    def yearly_expenses(self) -> float:
        return self.monthly_expenses * 12
