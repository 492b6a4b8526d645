"""Pydantic schemas for API request/response validation"""

import dataclasses
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from loan_assessment.domain.models import (
    ApplicantData,
    ApplicationRecord,
    ApplicationStatus,
    AssessmentMethod,
    AssessmentResult,
    EmploymentType,
    RiskLevel,
)


class ApplicantSchema(BaseModel):
    """Applicant fields accepted by the assessment endpoints"""

    model_config = ConfigDict(allow_inf_nan=False)

    id: Optional[str] = Field(None, description="Applicant identifier, generated when omitted")
    full_name: str = Field(..., min_length=1)
    age: int = Field(..., gt=0)
    monthly_income: float = Field(..., gt=0, description="Monthly income")
    monthly_debt: float = Field(..., ge=0, description="Total monthly debt payments")
    employment_type: EmploymentType
    employment_duration_years: float = Field(..., ge=0)
    credit_history_score: int = Field(..., description="External bureau score, typically 300-850")
    loan_amount_request: float = Field(..., gt=0)
    loan_term_months: int = Field(..., gt=0)
    missed_payments_last_2_years: int = Field(..., ge=0)

    def to_domain(self) -> ApplicantData:
        return ApplicantData(
            id=self.id or str(uuid.uuid4()),
            full_name=self.full_name,
            age=self.age,
            monthly_income=self.monthly_income,
            monthly_debt=self.monthly_debt,
            employment_type=self.employment_type,
            employment_duration_years=self.employment_duration_years,
            credit_history_score=self.credit_history_score,
            loan_amount_request=self.loan_amount_request,
            loan_term_months=self.loan_term_months,
            missed_payments_last_2_years=self.missed_payments_last_2_years,
        )

    @classmethod
    def from_domain(cls, applicant: ApplicantData) -> "ApplicantSchema":
        return cls(**dataclasses.asdict(applicant))


class AssessmentResponse(BaseModel):
    """One scoring method's result"""

    method: AssessmentMethod
    score: float
    risk_level: RiskLevel
    recommended_interest_rate: float
    max_approved_amount: float
    reasoning: List[str]
    processing_time_ms: int
    timestamp: datetime

    @classmethod
    def from_domain(cls, result: AssessmentResult) -> "AssessmentResponse":
        return cls(
            method=result.method,
            score=result.score,
            risk_level=result.risk_level,
            recommended_interest_rate=result.recommended_interest_rate,
            max_approved_amount=result.max_approved_amount,
            reasoning=list(result.reasoning),
            processing_time_ms=result.processing_time_ms,
            timestamp=result.timestamp,
        )


class ApplicationResponse(BaseModel):
    """Response for POST /v1/assessments"""

    applicant: ApplicantSchema
    traditional_assessment: Optional[AssessmentResponse] = None
    ai_assessment: Optional[AssessmentResponse] = None
    status: ApplicationStatus
    final_decision: Optional[str] = None

    @classmethod
    def from_domain(cls, record: ApplicationRecord) -> "ApplicationResponse":
        return cls(
            applicant=ApplicantSchema.from_domain(record.applicant),
            traditional_assessment=(
                AssessmentResponse.from_domain(record.traditional_assessment)
                if record.traditional_assessment
                else None
            ),
            ai_assessment=(
                AssessmentResponse.from_domain(record.ai_assessment) if record.ai_assessment else None
            ),
            status=record.status,
            final_decision=record.final_decision,
        )


class SampleApplicantsResponse(BaseModel):
    """Response for GET /v1/applicants/samples"""

    samples: Dict[str, ApplicantSchema]
