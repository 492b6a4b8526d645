"""POST /v1/assessments - side-by-side rule engine vs AI assessment"""

import logging
import time
from fastapi import APIRouter, Depends, HTTPException, Request

from loan_assessment.api.v1.schemas import ApplicantSchema, ApplicationResponse, AssessmentResponse
from loan_assessment.api.dependencies import get_ai_client, get_request_id
from loan_assessment.domain.exceptions import InvalidApplicantError, OrchestrationError
from loan_assessment.domain.orchestrator import assess_application
from loan_assessment.domain.rule_engine import assess_traditional
from loan_assessment.infrastructure.clients.gemini import GeminiClient
from loan_assessment.infrastructure.observability.logging import log_assessment
from loan_assessment.infrastructure.observability.metrics import record_assessment

router = APIRouter()


@router.post("/assessments", response_model=ApplicationResponse)
async def create_assessment(
    request_body: ApplicantSchema,
    request: Request,
    ai_client: GeminiClient = Depends(get_ai_client),
):
    """
    Evaluate one applicant with both scoring methods.

    Flow:
    1. Validate applicant data
    2. Run rule engine and AI assessment (AI falls back to demo/degraded results)
    3. Return PENDING record for the analyst's final decision
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        applicant = request_body.to_domain()
        record = await assess_application(applicant, ai_client=ai_client, request_id=request_id)

    except InvalidApplicantError as e:
        logging.warning(f"Invalid applicant: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except OrchestrationError as e:
        logging.error(f"Orchestration error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Assessment could not be completed")

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info(
        "Application assessed",
        extra={
            "request_id": request_id,
            "applicant_id": applicant.id,
            "duration_ms": (time.time() - start_time) * 1000,
        },
    )
    return ApplicationResponse.from_domain(record)


@router.post("/assessments/traditional", response_model=AssessmentResponse)
def create_traditional_assessment(request_body: ApplicantSchema, request: Request):
    """Rule engine only - synchronous, no AI call"""
    request_id = get_request_id(request)

    try:
        applicant = request_body.to_domain()
        result = assess_traditional(applicant)
    except InvalidApplicantError as e:
        logging.warning(f"Invalid applicant: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_assessment(result)
    log_assessment(request_id, applicant.id, result)
    return AssessmentResponse.from_domain(result)
