"""Liveness check for the projection API."""

from flask import Blueprint, Response, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Report that the engine is up and which environment it runs in."""
    return jsonify(
        {
            "status": "ok",
            "service": "horizon-engine",
            "environment": current_app.config["ENV"],
        }
    )
