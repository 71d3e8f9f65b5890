"""
Life event impact on the FIRE date.

A life event (sabbatical, children, renovation, ...) costs a one-time amount
and changes monthly expenses and income. Its impact is the delay it causes to
the baseline FIRE projection.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .fire_projection import compute_fire_projection, horizon_months
from .snapshot import FinancialSnapshot


class LifeEventTemplate(BaseModel):
    """Catalog defaults for a kind of life event."""

    model_config = ConfigDict(frozen=True)

    label: str
    icon: str
    default_cost: float = 0.0
    default_monthly_cost: float = 0.0
    default_duration: int = 0
    description: str = ""


LIFE_EVENT_CATALOG: Dict[str, LifeEventTemplate] = {
    "sabbatical": LifeEventTemplate(
        label="Sabbatical",
        icon="Palmtree",
        default_cost=2000,
        default_duration=6,
        description="Onbetaald verlof van het werk",
    ),
    "world_trip": LifeEventTemplate(
        label="Wereldreis",
        icon="Globe",
        default_cost=15000,
        default_monthly_cost=2000,
        default_duration=12,
        description="Langdurige reis rond de wereld",
    ),
    "children": LifeEventTemplate(
        label="Kinderen",
        icon="Baby",
        default_cost=5000,
        default_monthly_cost=500,
        default_duration=216,
        description="Opvoedkosten per kind",
    ),
    "renovation": LifeEventTemplate(
        label="Verbouwing",
        icon="Hammer",
        default_cost=30000,
        description="Grote verbouwing of renovatie",
    ),
    "study": LifeEventTemplate(
        label="Studie",
        icon="GraduationCap",
        default_cost=8000,
        default_duration=24,
        description="Opleiding of cursus",
    ),
    "career_change": LifeEventTemplate(
        label="Carrière switch",
        icon="Briefcase",
        default_cost=3000,
        default_duration=6,
        description="Overgang naar ander werk",
    ),
    "part_time": LifeEventTemplate(
        label="Part-time werken",
        icon="Clock",
        default_duration=60,
        description="Minder uren werken",
    ),
    "early_retirement": LifeEventTemplate(
        label="Vervroegd pensioen",
        icon="Sunset",
        description="Eerder stoppen met werken",
    ),
    "move": LifeEventTemplate(
        label="Verhuizing",
        icon="Home",
        default_cost=10000,
        description="Verhuizen naar ander huis of stad",
    ),
    "wedding": LifeEventTemplate(
        label="Trouwerij",
        icon="Heart",
        default_cost=20000,
        description="Bruiloft en huwelijk",
    ),
    "custom": LifeEventTemplate(
        label="Anders",
        icon="Calendar",
        description="Eigen levensgebeurtenis",
    ),
}


class LifeEvent(BaseModel):
    """A planned life event."""

    name: str = Field(..., min_length=1)
    event_type: str = Field(default="custom")
    target_age: Optional[float] = None
    one_time_cost: float = Field(default=0.0)
    monthly_cost_change: float = Field(default=0.0)
    monthly_income_change: float = Field(default=0.0)
    duration_months: int = Field(default=0, ge=0)
    is_active: bool = True

    @classmethod
    def from_catalog(cls, event_type: str, name: Optional[str] = None) -> "LifeEvent":
        """Create an event with the catalog defaults for its type."""
        template = LIFE_EVENT_CATALOG.get(event_type)
        if template is None:
            raise ValueError(f"Unknown life event type: {event_type}")
        return cls(
            name=name or template.label,
            event_type=event_type,
            one_time_cost=template.default_cost,
            monthly_cost_change=template.default_monthly_cost,
            duration_months=template.default_duration,
        )


class LifeEventImpact(BaseModel):
    """Effect of a life event on the FIRE projection."""

    event: LifeEvent
    fire_delay_months: int = Field(..., ge=0)
    total_cost: float
    freedom_days_lost: int = Field(..., ge=0)


def compute_life_event_impact(
    snapshot: FinancialSnapshot, event: LifeEvent
) -> LifeEventImpact:
    """
    Compute the FIRE delay caused by a single life event.

    Args:
        snapshot: Baseline financial position
        event: Life event to evaluate

    Returns:
        LifeEventImpact with delay, net cost and freedom days lost
    """
    base = compute_fire_projection(snapshot)

    total_cost = event.one_time_cost + event.monthly_cost_change * event.duration_months
    total_income_change = event.monthly_income_change * event.duration_months

    adjusted = snapshot.model_copy(
        update={
            "total_assets": max(0.0, snapshot.total_assets - event.one_time_cost),
            "monthly_expenses": max(
                0.0, snapshot.monthly_expenses + event.monthly_cost_change
            ),
            "monthly_income": max(
                0.0, snapshot.monthly_income + event.monthly_income_change
            ),
        }
    )
    adjusted_projection = compute_fire_projection(adjusted)

    # Never reaching FIRE counts as reaching it at the horizon
    horizon = horizon_months(base.current_age)
    base_months = (
        base.months_to_fire if base.months_to_fire is not None else horizon
    )
    adjusted_months = (
        adjusted_projection.months_to_fire
        if adjusted_projection.months_to_fire is not None
        else horizon
    )
    fire_delay_months = adjusted_months - base_months
    daily_expense = snapshot.yearly_expenses / 365
    freedom_days_lost = round(total_cost / daily_expense) if daily_expense > 0 else 0

    return LifeEventImpact(
        event=event,
        fire_delay_months=max(0, fire_delay_months),
        total_cost=total_cost - total_income_change,
        freedom_days_lost=max(0, freedom_days_lost),
    )
