"""Assessment orchestration - runs both scorers and assembles the comparison record"""

import asyncio
import contextlib
import dataclasses
import logging

from loan_assessment.domain.exceptions import InvalidApplicantError, InvalidDecisionError, OrchestrationError
from loan_assessment.domain.models import ApplicantData, ApplicationRecord, ApplicationStatus
from loan_assessment.domain.rule_engine import assess_traditional
from loan_assessment.infrastructure.clients.gemini import GeminiClient
from loan_assessment.infrastructure.observability.logging import log_assessment
from loan_assessment.infrastructure.observability.metrics import record_assessment

logger = logging.getLogger(__name__)


async def _cancel_and_wait(task: asyncio.Task) -> None:
    """Cancel task and let its cleanup (open HTTP client) finish"""
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


async def assess_application(
    applicant: ApplicantData,
    ai_client: GeminiClient | None = None,
    request_id: str = "unknown",
) -> ApplicationRecord:
    """
    Run the rule engine and the AI assessor over one applicant.

    Flow:
    1. Launch the AI assessment as a task
    2. Compute the rule engine result while the AI call is in flight
    3. Await the AI result and build a PENDING record

    Cancelling the caller cancels the AI task.

    Raises:
        InvalidApplicantError: applicant missing or malformed
        OrchestrationError: any other failure while assembling the record
    """
    if not isinstance(applicant, ApplicantData):
        raise InvalidApplicantError(f"Expected ApplicantData, got {type(applicant).__name__}")

    ai_client = ai_client or GeminiClient()
    ai_task = asyncio.create_task(ai_client.assess(applicant))

    try:
        traditional = assess_traditional(applicant)
        ai_result = await ai_task
    except asyncio.CancelledError:
        ai_task.cancel()
        raise
    except InvalidApplicantError:
        await _cancel_and_wait(ai_task)
        raise
    except Exception as e:
        await _cancel_and_wait(ai_task)
        logger.error(f"Assessment orchestration failed: {e}", extra={"request_id": request_id})
        raise OrchestrationError(f"Could not assess applicant {applicant.id}") from e

    for result in (traditional, ai_result):
        record_assessment(result)
        log_assessment(request_id, applicant.id, result)

    return ApplicationRecord(
        applicant=applicant,
        traditional_assessment=traditional,
        ai_assessment=ai_result,
        status=ApplicationStatus.PENDING,
    )


def record_final_decision(
    record: ApplicationRecord,
    status: ApplicationStatus,
    note: str | None = None,
) -> ApplicationRecord:
    """
    Record the analyst's final call on a pending record.

    Returns a new record; the original is left untouched.

    Raises:
        InvalidDecisionError: record already decided, or status is not APPROVED/REJECTED
    """
    try:
        status = ApplicationStatus(status)
    except ValueError as e:
        raise InvalidDecisionError(f"Unknown status: {status!r}") from e
    if status is ApplicationStatus.PENDING:
        raise InvalidDecisionError("Final decision must be APPROVED or REJECTED")
    if record.status is not ApplicationStatus.PENDING:
        raise InvalidDecisionError(f"Application already {record.status.value}")

    logger.info(
        "Final decision recorded",
        extra={"applicant_id": record.applicant.id, "status": status.value},
    )
    return dataclasses.replace(record, status=status, final_decision=note)
