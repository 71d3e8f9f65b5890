"""
Financial resilience score.

Maps a financial snapshot to a 0-100 score made of four 0-25 components:
emergency buffer, diversification, debt ratio and savings rate. Saturation
thresholds live in ResilienceCalibration so they can be tuned without touching
the scoring code.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .snapshot import FinancialSnapshot

COMPONENT_MAX = 25


class ResilienceCalibration(BaseModel):
    """Thresholds at which each component reaches its full score."""

    model_config = ConfigDict(frozen=True)

    assumed_liquid_share: float = Field(
        default=0.30,
        ge=0,
        le=1,
        description="Liquid share of assets when liquid_assets is unknown",
    )
    emergency_months_target: float = Field(
        default=6.0, gt=0, description="Months of expenses for a full buffer"
    )
    non_cash_share_target: float = Field(
        default=0.50, gt=0, le=1, description="Invested share for full diversification"
    )
    asset_debt_ratio_target: float = Field(
        default=3.0,
        gt=0,
        description="Assets-to-debts ratio for full diversification without liquid assets",
    )
    diversified_assets_target: float = Field(
        default=100000.0,
        gt=0,
        description="Total assets for full diversification without liquid assets",
    )
    savings_rate_target: float = Field(
        default=0.30, gt=0, le=1, description="Savings rate for a full score"
    )
    label_bands: List[Tuple[int, str]] = Field(
        default=[
            (80, "Uitstekend"),
            (60, "Sterk"),
            (40, "Redelijk"),
            (20, "Kwetsbaar"),
            (0, "Kritiek"),
        ],
        description="(minimum total, label) pairs, highest first",
    )


class ResilienceBreakdown(BaseModel):
    """Component scores, each between 0 and 25."""

    model_config = ConfigDict(frozen=True)

    emergency: int = Field(..., ge=0, le=COMPONENT_MAX)
    diversification: int = Field(..., ge=0, le=COMPONENT_MAX)
    debt_ratio: int = Field(..., ge=0, le=COMPONENT_MAX)
    savings_rate: int = Field(..., ge=0, le=COMPONENT_MAX)

    @property
    def total(self) -> int:
        return self.emergency + self.diversification + self.debt_ratio + self.savings_rate


class ResilienceScore(BaseModel):
    """Composite resilience score."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(..., ge=0, le=4 * COMPONENT_MAX)
    label: str
    breakdown: ResilienceBreakdown


def _scale(fraction: float) -> int:
    """Scale a 0-1 fraction to a rounded component score."""
    clamped = min(max(fraction, 0.0), 1.0)
    return int(min(COMPONENT_MAX, max(0, round(clamped * COMPONENT_MAX))))


def _liquid_assets(snapshot: FinancialSnapshot, calibration: ResilienceCalibration) -> float:
    if snapshot.liquid_assets is not None:
        return snapshot.liquid_assets
    return snapshot.total_assets * calibration.assumed_liquid_share


def emergency_score(
    snapshot: FinancialSnapshot, calibration: ResilienceCalibration
) -> int:
    """Months of expenses covered by liquid assets."""
    liquid = _liquid_assets(snapshot, calibration)
    if snapshot.monthly_expenses <= 0:
        return COMPONENT_MAX if liquid > 0 else 0
    months = liquid / snapshot.monthly_expenses
    return _scale(months / calibration.emergency_months_target)


def diversification_score(
    snapshot: FinancialSnapshot, calibration: ResilienceCalibration
) -> int:
    """
    Share of assets held outside cash.

    Without a liquid asset figure the split is unknown, so the score falls back
    to the asset-to-debt ratio, scaled down for portfolios too small to spread.
    """
    if snapshot.total_assets <= 0:
        return 0
    if snapshot.liquid_assets is None:
        if snapshot.total_debts > 0:
            ratio = snapshot.total_assets / snapshot.total_debts
            coverage = min(ratio / calibration.asset_debt_ratio_target, 1.0)
        else:
            coverage = 1.0
        size = min(snapshot.total_assets / calibration.diversified_assets_target, 1.0)
        return _scale(coverage * size)
    non_cash_share = 1 - snapshot.liquid_assets / snapshot.total_assets
    return _scale(non_cash_share / calibration.non_cash_share_target)


def debt_ratio_score(snapshot: FinancialSnapshot) -> int:
    """Lower debt relative to assets scores higher."""
    if snapshot.total_debts <= 0:
        return COMPONENT_MAX
    if snapshot.total_assets <= 0:
        return 0
    return _scale(1 - snapshot.total_debts / snapshot.total_assets)


def savings_rate_score(
    snapshot: FinancialSnapshot, calibration: ResilienceCalibration
) -> int:
    if snapshot.monthly_income <= 0:
        return 0
    rate = snapshot.monthly_savings / snapshot.monthly_income
    return _scale(rate / calibration.savings_rate_target)


def resilience_label(total: int, calibration: ResilienceCalibration) -> str:
    """Banded text label for a total score."""
    for minimum, label in calibration.label_bands:
        if total >= minimum:
            return label
    return calibration.label_bands[-1][1]


def compute_resilience_score(
    snapshot: FinancialSnapshot, calibration: Optional[ResilienceCalibration] = None
) -> ResilienceScore:
    """
    Score the financial resilience of a snapshot.

    Args:
        snapshot: Financial position to score
        calibration: Saturation thresholds (defaults apply when None)

    Returns:
        ResilienceScore with total, label and breakdown
    """
    calibration = calibration or ResilienceCalibration()
    breakdown = ResilienceBreakdown(
        emergency=emergency_score(snapshot, calibration),
        diversification=diversification_score(snapshot, calibration),
        debt_ratio=debt_ratio_score(snapshot),
        savings_rate=savings_rate_score(snapshot, calibration),
    )
    total = breakdown.total
    return ResilienceScore(
        total=total,
        label=resilience_label(total, calibration),
        breakdown=breakdown,
    )
