"""
Dutch state pension (AOW) for decumulation planning.

The AOW is modelled as a step function: nothing before the statutory age, a
fixed yearly amount from that age on. Household composition selects the
monthly amount.
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

NL_AOW_AGE = 67
NL_AOW_MONTHLY = 1380.0  # single person, gross 2025

HouseholdType = Literal["single", "couple"]

# Gross monthly AOW for the whole household
AOW_MONTHLY_BY_HOUSEHOLD: Dict[str, float] = {
    "single": NL_AOW_MONTHLY,
    "couple": 1890.0,
}


class StatePension(BaseModel):
    """AOW entitlement for a household."""

    model_config = ConfigDict(frozen=True)

    start_age: float = Field(
        default=NL_AOW_AGE, ge=0, le=120, description="Age at which AOW starts"
    )
    household: HouseholdType = Field(
        default="single", description="Household composition"
    )
    monthly_amount: Optional[float] = Field(
        default=None,
        ge=0,
        description="Override of the gross monthly amount for the household",
    )

    @property
    def effective_monthly_amount(self) -> float:
        if self.monthly_amount is not None:
            return self.monthly_amount
        return AOW_MONTHLY_BY_HOUSEHOLD[self.household]

    def is_active(self, age: float) -> bool:
        """Check whether AOW is paid at the given age."""
        return age >= self.start_age

    def yearly_income(self, age: float) -> float:
        """
        Get the AOW income for the year starting at the given age.

        Args:
            age: Age at the start of the year

        Returns:
            Yearly AOW income, 0 before the start age
        """
        if not self.is_active(age):
            return 0.0
        return self.effective_monthly_amount * 12


def calculate_state_pension_present_value(
    pension: StatePension,
    from_age: int,
    to_age: int,
    discount_rate: float,
) -> float:
    """
    Present value at from_age of the AOW paid until to_age (exclusive).

    Args:
        pension: AOW entitlement
        from_age: Age at which the value is measured
        to_age: Age at which payments stop
        discount_rate: Annual discount rate

    Returns:
        Present value of the AOW payments
    """
    present_value = 0.0
    for offset, age in enumerate(range(from_age, to_age)):
        present_value += pension.yearly_income(age) / (1 + discount_rate) ** offset
    return present_value
