"""
Pytest configuration and shared fixtures for the Horizon engine tests.
"""

import pytest

from horizon.config import reset_global_settings
from horizon.models.snapshot import FinancialSnapshot


@pytest.fixture(autouse=True)
def test_settings_env(monkeypatch):
    """Provide a valid SECRET_KEY and a fresh global settings instance."""
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    reset_global_settings()
    yield
    reset_global_settings()


@pytest.fixture
def sample_snapshot():
    """Snapshot of a household building wealth with positive net savings."""
    return FinancialSnapshot(
        total_assets=150000,
        total_debts=20000,
        monthly_income=4000,
        monthly_expenses=2500,
        monthly_contributions=500,
        yearly_must_expenses=18000,
        date_of_birth="1990-01-01",
    )


@pytest.fixture
def app():
    """Create the Flask application for testing."""
    from horizon import create_app

    app = create_app("testing")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
