"""GET /v1/applicants/samples - preset applicant profiles"""

from fastapi import APIRouter

from loan_assessment.api.v1.schemas import ApplicantSchema, SampleApplicantsResponse
from loan_assessment.domain.samples import sample_applicants

router = APIRouter()


@router.get("/applicants/samples", response_model=SampleApplicantsResponse)
def get_sample_applicants():
    """
    Reference applicants for prefilling the application form.

    Returns:
        "solid" and "risky" profiles
    """
    return SampleApplicantsResponse(
        samples={name: ApplicantSchema.from_domain(a) for name, a in sample_applicants().items()}
    )
