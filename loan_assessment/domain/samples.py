"""Preset applicant profiles for demos and form prefill"""

import uuid
from typing import Dict

from loan_assessment.domain.models import ApplicantData, EmploymentType


def sample_applicants() -> Dict[str, ApplicantData]:
    """
    Two reference applicants at opposite ends of the rule engine.

    - solid: every rule passes, scores 100 / LOW
    - risky: every rule fires, clamps to 0 / CRITICAL
    """
    return {
        "solid": ApplicantData(
            id=str(uuid.uuid4()),
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
        ),
        "risky": ApplicantData(
            id=str(uuid.uuid4()),
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
        ),
    }
