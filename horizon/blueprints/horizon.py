"""
Horizon projection blueprint.

Exposes the projection engine as short-lived synchronous JSON endpoints:
scenarios, FIRE projection, resilience score, withdrawal strategies,
Monte Carlo and life event impact.
"""

from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from horizon.models.errors import HorizonError
from horizon.models.life_events import LIFE_EVENT_CATALOG
from horizon.models.market_weather import MARKET_WEATHER
from horizon.services.horizon_service import (
    HorizonService,
    LifeEventImpactRequest,
    MonteCarloRequest,
    ScenariosRequest,
    SnapshotRequest,
    WithdrawalRequest,
)

horizon_bp = Blueprint("horizon", __name__, url_prefix="/api/horizon")


@horizon_bp.errorhandler(ValidationError)
def handle_validation_error(error: ValidationError) -> Any:
    """Return 400 with pydantic's error details."""
    return (
        jsonify(
            {
                "error": "Invalid request",
                "details": error.errors(include_url=False, include_context=False),
            }
        ),
        400,
    )


@horizon_bp.errorhandler(HorizonError)
def handle_horizon_error(error: HorizonError) -> Any:
    """Return 400 for unknown strategies, regimes and malformed dates."""
    return jsonify({"error": str(error)}), 400


@horizon_bp.errorhandler(Exception)
def handle_unexpected_error(error: Exception) -> Any:
    current_app.logger.error(f"Error handling {request.path}: {str(error)}")
    return jsonify({"error": "Internal server error"}), 500


def _json_body() -> Any:
    return request.get_json(silent=True) or {}


@horizon_bp.route("/market-weather", methods=["GET"])
def list_market_weather() -> Any:
    """List the available market weather regimes."""
    return jsonify(
        {key: regime.model_dump() for key, regime in MARKET_WEATHER.items()}
    )


@horizon_bp.route("/scenarios", methods=["POST"])
def scenarios() -> Any:
    """Project the drifter, current and optimizer paths.

    Returns:
        JSON response with one path per profile
    """
    body = ScenariosRequest.model_validate(_json_body())
    paths = HorizonService().scenarios(body)
    return jsonify({"scenarios": [path.model_dump(mode="json") for path in paths]})


@horizon_bp.route("/fire", methods=["POST"])
def fire_projection() -> Any:
    body = SnapshotRequest.model_validate(_json_body())
    projection = HorizonService().fire_projection(body.snapshot)
    return jsonify(projection.model_dump(mode="json"))


@horizon_bp.route("/fire-range", methods=["POST"])
def fire_range() -> Any:
    body = SnapshotRequest.model_validate(_json_body())
    return jsonify(HorizonService().fire_range(body.snapshot).model_dump(mode="json"))


@horizon_bp.route("/resilience", methods=["POST"])
def resilience() -> Any:
    """Score the financial resilience of a snapshot."""
    body = SnapshotRequest.model_validate(_json_body())
    score = HorizonService().resilience(body.snapshot)
    return jsonify(score.model_dump(mode="json"))


@horizon_bp.route("/withdrawal", methods=["POST"])
def withdrawal() -> Any:
    """Simulate a drawdown for one withdrawal strategy.

    Returns:
        JSON response with the resolved inputs and the yearly schedule
    """
    body = WithdrawalRequest.model_validate(_json_body())
    if not body.strategy:
        return jsonify({"error": "strategy is required"}), 400
    plan = HorizonService().withdrawal_plan(body)
    return jsonify(plan.model_dump(mode="json"))


@horizon_bp.route("/withdrawal/compare", methods=["POST"])
def compare_withdrawals() -> Any:
    """Simulate every withdrawal strategy on the same inputs."""
    body = WithdrawalRequest.model_validate(_json_body())
    plans = HorizonService().compare_withdrawals(body)
    return jsonify(
        {strategy: plan.model_dump(mode="json") for strategy, plan in plans.items()}
    )


@horizon_bp.route("/monte-carlo", methods=["POST"])
def monte_carlo() -> Any:
    body = MonteCarloRequest.model_validate(_json_body())
    result = HorizonService().monte_carlo(body)
    return jsonify(result.model_dump(mode="json"))


@horizon_bp.route("/life-events/catalog", methods=["GET"])
def life_event_catalog() -> Any:
    return jsonify(
        {key: template.model_dump() for key, template in LIFE_EVENT_CATALOG.items()}
    )


@horizon_bp.route("/life-events/impact", methods=["POST"])
def life_event_impact() -> Any:
    """Compute the FIRE delay caused by one life event."""
    body = LifeEventImpactRequest.model_validate(_json_body())
    impact = HorizonService().life_event_impact(body)
    return jsonify(impact.model_dump(mode="json"))
