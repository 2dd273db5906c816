"""
Pytest configuration and fixtures for test suite.
"""
import pytest
from datetime import date

from fastapi.testclient import TestClient
from app import app
from keydates.recurrence.generator import Agreement
from keydates.utils.config import load_yaml_config


@pytest.fixture
def client():
    """
    Fixture that provides a TestClient instance for the FastAPI app.
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def fresh_config():
    """Re-read YAML config for every test."""
    load_yaml_config.cache_clear()
    yield
    load_yaml_config.cache_clear()


@pytest.fixture
def make_agreement():
    """
    Factory for Agreement snapshots with test-friendly defaults.
    """
    def _make(agreement_id="agr-1", **overrides):
        fields = {
            "vendor": "Acme",
            "title": "Hosting",
            "auto_renews": False,
            "notice_days": 0,
        }
        fields.update(overrides)
        return Agreement(id=agreement_id, **fields)

    return _make


@pytest.fixture
def renewing_agreement(make_agreement):
    """Yearly auto-renewal with a 30-day notice period."""
    return make_agreement(
        end_on=date(2025, 1, 15),
        auto_renews=True,
        renewal_frequency_months=12,
        notice_days=30,
    )
