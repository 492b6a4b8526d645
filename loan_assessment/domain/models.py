"""Domain models - pure Python dataclasses representing business entities"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from loan_assessment.domain.exceptions import InvalidApplicantError


class EmploymentType(str, Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    SELF_EMPLOYED = "self_employed"
    UNEMPLOYED = "unemployed"
    RETIRED = "retired"


class RiskLevel(str, Enum):
    """Ordered risk scale, LOW is best"""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return list(RiskLevel).index(self)


class AssessmentMethod(str, Enum):
    TRADITIONAL = "TRADITIONAL"
    AI = "AI"


class ApplicationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class ApplicantData:
    """Loan applicant as submitted, shared read-only by both scorers"""

    id: str
    full_name: str
    age: int
    monthly_income: float
    monthly_debt: float
    employment_type: EmploymentType
    employment_duration_years: float
    credit_history_score: int  # External bureau score, typically 300-850
    loan_amount_request: float
    loan_term_months: int
    missed_payments_last_2_years: int

    def __post_init__(self) -> None:
        for name in ("monthly_income", "monthly_debt", "employment_duration_years", "loan_amount_request"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidApplicantError(f"{name} must be a finite number")
        if self.monthly_income <= 0:
            raise InvalidApplicantError("monthly_income must be positive")
        if self.monthly_debt < 0:
            raise InvalidApplicantError("monthly_debt cannot be negative")
        if self.employment_duration_years < 0:
            raise InvalidApplicantError("employment_duration_years cannot be negative")
        if self.missed_payments_last_2_years < 0:
            raise InvalidApplicantError("missed_payments_last_2_years cannot be negative")
        if self.loan_amount_request <= 0:
            raise InvalidApplicantError("loan_amount_request must be positive")
        if self.loan_term_months <= 0:
            raise InvalidApplicantError("loan_term_months must be positive")
        try:
            # frozen: bypass __setattr__ to coerce plain strings to the enum
            object.__setattr__(self, "employment_type", EmploymentType(self.employment_type))
        except ValueError as e:
            raise InvalidApplicantError(f"Unknown employment type: {self.employment_type!r}") from e


@dataclass(frozen=True)
class AssessmentResult:
    """Output of either scoring method"""

    method: AssessmentMethod
    score: float  # 0-100
    risk_level: RiskLevel
    recommended_interest_rate: float  # annual %
    max_approved_amount: float
    reasoning: Tuple[str, ...]
    processing_time_ms: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ApplicationRecord:
    """One applicant paired with both assessments for side-by-side review"""

    applicant: ApplicantData
    traditional_assessment: Optional[AssessmentResult]
    ai_assessment: Optional[AssessmentResult]
    status: ApplicationStatus = ApplicationStatus.PENDING
    final_decision: Optional[str] = None
