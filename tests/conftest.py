"""Pytest fixtures for testing"""

import dataclasses
import pytest
from typing import Callable
from fastapi.testclient import TestClient
from loan_assessment.api.main import create_app
from loan_assessment.api.dependencies import get_ai_client
from loan_assessment.config import Settings
from loan_assessment.domain.models import ApplicantData, EmploymentType
from loan_assessment.infrastructure.clients.gemini import GeminiClient


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests run in demo mode unless they pass an explicit key"""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    # A developer's local .env must not leak a real key into tests
    monkeypatch.setitem(Settings.model_config, "env_file", None)


@pytest.fixture
def solid_applicant() -> ApplicantData:
    """Scenario A: every rule passes"""
    return ApplicantData(
        id="app-solid",
        full_name="Maria González",
        age=34,
        monthly_income=3500,
        monthly_debt=800,
        employment_type=EmploymentType.FULL_TIME,
        employment_duration_years=4,
        credit_history_score=720,
        loan_amount_request=25000,
        loan_term_months=36,
        missed_payments_last_2_years=0,
    )


@pytest.fixture
def risky_applicant() -> ApplicantData:
    """Scenario B: every rule fires"""
    return ApplicantData(
        id="app-risky",
        full_name="Carlos Rodriguez",
        age=28,
        monthly_income=1200,
        monthly_debt=700,
        employment_type=EmploymentType.PART_TIME,
        employment_duration_years=0.5,
        credit_history_score=580,
        loan_amount_request=15000,
        loan_term_months=24,
        missed_payments_last_2_years=2,
    )


@pytest.fixture
def make_applicant(solid_applicant: ApplicantData) -> Callable[..., ApplicantData]:
    """Build a variant of the solid applicant with selected fields overridden"""

    def _make(**overrides) -> ApplicantData:
        return dataclasses.replace(solid_applicant, **overrides)

    return _make


@pytest.fixture
def demo_client() -> GeminiClient:
    """AI client in demo mode without the simulated delay"""
    return GeminiClient(demo_delay_seconds=0)


@pytest.fixture
def client(demo_client: GeminiClient) -> TestClient:
    """Create FastAPI test client with a zero-delay AI client"""
    app = create_app()
    app.dependency_overrides[get_ai_client] = lambda: demo_client
    return TestClient(app)


@pytest.fixture
def applicant_payload() -> dict:
    """Request body for the assessment endpoints (scenario A)"""
    return {
        "full_name": "Maria González",
        "age": 34,
        "monthly_income": 3500,
        "monthly_debt": 800,
        "employment_type": "full_time",
        "employment_duration_years": 4,
        "credit_history_score": 720,
        "loan_amount_request": 25000,
        "loan_term_months": 36,
        "missed_payments_last_2_years": 0,
    }
