"""Gemini API client for AI-backed credit risk assessment"""

import asyncio
import json
import logging
import time
from dataclasses import asdict
from typing import Any, Dict, List

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from loan_assessment.config import get_api_key, settings
from loan_assessment.domain.exceptions import AIServiceError
from loan_assessment.domain.models import ApplicantData, AssessmentMethod, AssessmentResult, RiskLevel
from loan_assessment.infrastructure.observability.metrics import record_ai_outcome

logger = logging.getLogger(__name__)

RISK_LEVEL_LABELS = {
    RiskLevel.LOW: "Low",
    RiskLevel.MEDIUM: "Medium",
    RiskLevel.HIGH: "High",
    RiskLevel.CRITICAL: "Critical",
}
_LABEL_TO_RISK_LEVEL = {label: level for level, label in RISK_LEVEL_LABELS.items()}

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "NUMBER", "description": "Calculated credit score from 0 to 100"},
        "riskLevel": {"type": "STRING", "enum": list(RISK_LEVEL_LABELS.values())},
        "recommendedInterestRate": {
            "type": "NUMBER",
            "description": "Recommended annual interest rate in percent (e.g. 12.5)",
        },
        "maxApprovedAmount": {"type": "NUMBER", "description": "Maximum amount suggested for approval"},
        "reasoning": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Key reasons for the decision, including subtle factors simple rules miss",
        },
    },
    "required": ["score", "riskLevel", "recommendedInterestRate", "maxApprovedAmount", "reasoning"],
}

PROMPT_TEMPLATE = """\
Act as a senior credit risk analyst at a major bank.
Evaluate the following credit application.

Analyze not only the hard financial ratios (DTI) but also employment stability
and historical payment behaviour. Look for correlations that a simple
rule-based system could miss.

Applicant data:
{applicant_json}

Provide a fair but prudent assessment.
"""

DEGRADED_REASON = "Could not reach the AI service. Please check your connection or API key."


class AIAssessmentPayload(BaseModel):
    """Structured object the model is constrained to return"""

    model_config = ConfigDict(allow_inf_nan=False)

    score: float = Field(ge=0, le=100)
    riskLevel: str
    recommendedInterestRate: float = Field(ge=0)
    maxApprovedAmount: float = Field(ge=0)
    reasoning: List[str] = Field(min_length=1)


def map_risk_label(label: str) -> RiskLevel:
    """Map the model's risk label to the internal tier; unknown labels fall back to MEDIUM"""
    return _LABEL_TO_RISK_LEVEL.get(label, RiskLevel.MEDIUM)


def build_prompt(applicant: ApplicantData) -> str:
    applicant_json = json.dumps(asdict(applicant), indent=2, ensure_ascii=False)
    return PROMPT_TEMPLATE.format(applicant_json=applicant_json)


def build_request_body(applicant: ApplicantData, temperature: float) -> Dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": build_prompt(applicant)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
            "temperature": temperature,
        },
    }


def parse_response(data: Dict[str, Any]) -> AIAssessmentPayload:
    """
    Extract and validate the structured assessment from a generateContent response.

    Raises:
        AIServiceError: No candidate text, invalid JSON, or schema mismatch
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
        text = "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError, AttributeError) as e:
        raise AIServiceError(f"No response content from AI service: {e}") from e

    if not text.strip():
        raise AIServiceError("Empty response from AI service")

    try:
        return AIAssessmentPayload.model_validate(json.loads(text))
    except (ValueError, ValidationError) as e:
        raise AIServiceError(f"Malformed assessment payload: {e}") from e


def _elapsed_ms(start_time: float) -> int:
    return round((time.perf_counter() - start_time) * 1000)


class GeminiClient:
    """Client for the external generative scoring service"""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        temperature: float | None = None,
        demo_delay_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        # api_key stays None here; the settings lookup happens per call
        self.api_key = api_key
        self.model = model or settings.gemini_model
        self.base_url = base_url or settings.gemini_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.temperature = settings.ai_temperature if temperature is None else temperature
        self.demo_delay_seconds = (
            settings.demo_delay_seconds if demo_delay_seconds is None else demo_delay_seconds
        )
        self.transport = transport

    async def assess(self, applicant: ApplicantData) -> AssessmentResult:
        """
        Score applicant with the AI service.

        Never raises for service problems:
        - no API key: simulated demo result
        - call or payload failure: degraded worst-case result
        """
        start_time = time.perf_counter()
        api_key = self.api_key or get_api_key()

        if not api_key:
            return await self._simulate(applicant, start_time)

        try:
            payload = await self._generate(applicant, api_key)
        except AIServiceError as e:
            logger.error(f"AI service error: {e}", extra={"applicant_id": applicant.id})
            return self._degraded(start_time)
        except Exception:
            logger.exception("Unexpected AI client error", extra={"applicant_id": applicant.id})
            return self._degraded(start_time)

        record_ai_outcome("success")
        return AssessmentResult(
            method=AssessmentMethod.AI,
            score=payload.score,
            risk_level=map_risk_label(payload.riskLevel),
            recommended_interest_rate=payload.recommendedInterestRate,
            max_approved_amount=payload.maxApprovedAmount,
            reasoning=tuple(payload.reasoning),
            processing_time_ms=_elapsed_ms(start_time),
        )

    async def _generate(self, applicant: ApplicantData, api_key: str) -> AIAssessmentPayload:
        """
        Single generateContent call, no retries.

        Raises:
            AIServiceError: On timeout, HTTP errors, or unusable response
        """
        url = f"{self.base_url}/models/{self.model}:generateContent"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    url,
                    headers={"x-goog-api-key": api_key},
                    json=build_request_body(applicant, self.temperature),
                )
                response.raise_for_status()
                data = response.json()
            except httpx.TimeoutException as e:
                raise AIServiceError(f"AI service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AIServiceError(f"AI service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise AIServiceError(f"AI service unreachable: {e}") from e
            except ValueError as e:
                raise AIServiceError(f"AI service returned non-JSON body: {e}") from e

        return parse_response(data)

    async def _simulate(self, applicant: ApplicantData, start_time: float) -> AssessmentResult:
        """Deterministic stand-in used when no API key is configured"""
        logger.warning("API key not found. Running AI assessment in demo mode.")
        await asyncio.sleep(self.demo_delay_seconds)

        is_risky = (
            applicant.monthly_debt / applicant.monthly_income > 0.4
            or applicant.credit_history_score < 600
        )
        record_ai_outcome("demo")

        return AssessmentResult(
            method=AssessmentMethod.AI,
            score=55 if is_risky else 88,
            risk_level=RiskLevel.HIGH if is_risky else RiskLevel.LOW,
            recommended_interest_rate=18.5 if is_risky else 10.5,
            max_approved_amount=5000 if is_risky else applicant.monthly_income * 5,
            reasoning=(
                "DEMO MODE: no API key was found in the configuration.",
                "Simulation: elevated risk due to debt load."
                if is_risky
                else "Simulation: solid, low-risk profile.",
                "To enable the real AI assessment, set the GEMINI_API_KEY environment variable.",
            ),
            processing_time_ms=_elapsed_ms(start_time),
        )

    def _degraded(self, start_time: float) -> AssessmentResult:
        record_ai_outcome("failure")
        return AssessmentResult(
            method=AssessmentMethod.AI,
            score=0,
            risk_level=RiskLevel.CRITICAL,
            recommended_interest_rate=0,
            max_approved_amount=0,
            reasoning=(DEGRADED_REASON,),
            processing_time_ms=_elapsed_ms(start_time),
        )


async def assess_ai(applicant: ApplicantData, client: GeminiClient | None = None) -> AssessmentResult:
    """Main entry point: AI assessment with demo and degraded fallbacks"""
    return await (client or GeminiClient()).assess(applicant)
