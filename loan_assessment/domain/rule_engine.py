"""Deterministic rule engine - fixed weighted rules over the applicant record"""

import math
import time
from typing import List, Tuple

from loan_assessment.domain.exceptions import InvalidApplicantError
from loan_assessment.domain.models import ApplicantData, AssessmentMethod, AssessmentResult, RiskLevel

BASELINE_REASON = "Standard credit profile"

# Flat policy ceiling: 40% of annual income, independent of score
MAX_AMOUNT_INCOME_SHARE = 0.40


def debt_to_income_ratio(applicant: ApplicantData) -> float:
    """
    Monthly debt payments over monthly income.

    Raises:
        InvalidApplicantError: income is zero or negative (ratio undefined)
    """
    if applicant.monthly_income <= 0:
        raise InvalidApplicantError("Debt-to-income ratio undefined for non-positive income")
    return applicant.monthly_debt / applicant.monthly_income


def calculate_rule_score(applicant: ApplicantData) -> Tuple[int, List[str]]:
    """
    Apply additive penalties against a ceiling of 100, clamped to [0, 100].

    Penalties:
    - DTI > 50%: -30, DTI > 35%: -15
    - Bureau score < 600: -40, < 700: -15 (no reason emitted)
    - Employment tenure < 1 year: -20
    - Missed payments: -15 each

    Returns: (clamped score, reasons)
    """
    score = 100
    reasons: List[str] = []

    dti = debt_to_income_ratio(applicant)
    if dti > 0.5:
        score -= 30
        reasons.append(f"High DTI ({dti * 100:.1f}%)")
    elif dti > 0.35:
        score -= 15
        reasons.append(f"Moderate DTI ({dti * 100:.1f}%)")

    if applicant.credit_history_score < 600:
        score -= 40
        reasons.append("Low external credit score")
    elif applicant.credit_history_score < 700:
        score -= 15

    if applicant.employment_duration_years < 1:
        score -= 20
        reasons.append("Employment tenure under 1 year")

    missed = applicant.missed_payments_last_2_years
    if missed > 0:
        score -= missed * 15
        reasons.append(f"{missed} recent missed payments")

    return max(0, min(100, score)), reasons


def determine_risk_tier(score: float) -> Tuple[RiskLevel, float]:
    """
    Map clamped score to risk tier and annual rate.

    Bands are inclusive on their lower bound:
    - < 40:  CRITICAL, 25.0%
    - 40-59: HIGH, 18.5%
    - 60-79: MEDIUM, 14.5%
    - 80+:   LOW, 10.5%

    Returns: (risk_level, interest_rate)
    """
    if score < 40:
        return RiskLevel.CRITICAL, 25.0
    elif score < 60:
        return RiskLevel.HIGH, 18.5
    elif score < 80:
        return RiskLevel.MEDIUM, 14.5
    else:
        return RiskLevel.LOW, 10.5


def calculate_max_amount(applicant: ApplicantData) -> int:
    """40% of annual income, rounded half up to a whole currency unit"""
    return math.floor(applicant.monthly_income * 12 * MAX_AMOUNT_INCOME_SHARE + 0.5)


def assess_traditional(applicant: ApplicantData) -> AssessmentResult:
    """
    Main entry point: score applicant with the fixed rule set.

    Pure and synchronous; only side effect is reading the clock for timing.
    """
    start_time = time.perf_counter()

    score, reasons = calculate_rule_score(applicant)
    risk_level, rate = determine_risk_tier(score)

    return AssessmentResult(
        method=AssessmentMethod.TRADITIONAL,
        score=score,
        risk_level=risk_level,
        recommended_interest_rate=rate,
        max_approved_amount=calculate_max_amount(applicant),
        reasoning=tuple(reasons) if reasons else (BASELINE_REASON,),
        processing_time_ms=round((time.perf_counter() - start_time) * 1000),
    )
