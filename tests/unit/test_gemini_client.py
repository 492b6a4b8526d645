"""Unit tests for the AI assessment client"""

import asyncio
import json
import httpx
import pytest
from unittest.mock import AsyncMock, patch
from loan_assessment.domain.exceptions import AIServiceError
from loan_assessment.domain.models import AssessmentMethod, RiskLevel
from loan_assessment.infrastructure.clients.gemini import (
    DEGRADED_REASON,
    RESPONSE_SCHEMA,
    GeminiClient,
    assess_ai,
    build_request_body,
    map_risk_label,
    parse_response,
)

VALID_PAYLOAD = {
    "score": 72,
    "riskLevel": "Medium",
    "recommendedInterestRate": 13.2,
    "maxApprovedAmount": 20000,
    "reasoning": ["Stable employment offsets moderate DTI", "Clean payment history"],
}


def gemini_response(payload) -> dict:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def make_client(handler, **kwargs) -> GeminiClient:
    return GeminiClient(api_key="test-key", transport=httpx.MockTransport(handler), **kwargs)


def assert_degraded(result):
    assert result.method == AssessmentMethod.AI
    assert result.score == 0
    assert result.risk_level == RiskLevel.CRITICAL
    assert result.recommended_interest_rate == 0
    assert result.max_approved_amount == 0
    assert result.reasoning == (DEGRADED_REASON,)


# Demo mode


async def test_demo_mode_safe_branch(demo_client, solid_applicant):
    result = await demo_client.assess(solid_applicant)

    assert result.method == AssessmentMethod.AI
    assert result.score == 88
    assert result.risk_level == RiskLevel.LOW
    assert result.recommended_interest_rate == 10.5
    assert result.max_approved_amount == 17500  # 5x monthly income
    assert "DEMO MODE" in result.reasoning[0]


async def test_demo_mode_risky_by_dti(demo_client, make_applicant):
    result = await demo_client.assess(make_applicant(monthly_income=1000, monthly_debt=410))

    assert result.score == 55
    assert result.risk_level == RiskLevel.HIGH
    assert result.recommended_interest_rate == 18.5
    assert result.max_approved_amount == 5000


async def test_demo_mode_risky_by_bureau_score(demo_client, make_applicant):
    result = await demo_client.assess(make_applicant(credit_history_score=599))

    assert result.score == 55
    assert result.risk_level == RiskLevel.HIGH
    assert any("demo" in reason.lower() for reason in result.reasoning)
    assert any("GEMINI_API_KEY" in reason for reason in result.reasoning)


async def test_demo_mode_never_calls_service(solid_applicant):
    """Test no HTTP request is made without a key"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("service must not be called in demo mode")

    client = GeminiClient(demo_delay_seconds=0, transport=httpx.MockTransport(handler))
    result = await client.assess(solid_applicant)

    assert result.score == 88


async def test_demo_mode_delay_counted_in_processing_time(solid_applicant):
    client = GeminiClient(demo_delay_seconds=0.05)
    result = await client.assess(solid_applicant)

    assert result.processing_time_ms >= 40


async def test_api_key_read_lazily_from_environment(monkeypatch, solid_applicant):
    """Test key set after client construction is picked up at call time"""
    seen_keys = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_keys.append(request.headers["x-goog-api-key"])
        return httpx.Response(200, json=gemini_response(VALID_PAYLOAD))

    client = GeminiClient(transport=httpx.MockTransport(handler))
    monkeypatch.setenv("GEMINI_API_KEY", "late-key")

    result = await client.assess(solid_applicant)

    assert seen_keys == ["late-key"]
    assert result.score == 72


# Service success


async def test_success_maps_structured_response(solid_applicant):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=gemini_response(VALID_PAYLOAD))

    result = await make_client(handler).assess(solid_applicant)

    assert result.method == AssessmentMethod.AI
    assert result.score == 72
    assert result.risk_level == RiskLevel.MEDIUM
    assert result.recommended_interest_rate == 13.2
    assert result.max_approved_amount == 20000
    assert result.reasoning == tuple(VALID_PAYLOAD["reasoning"])
    assert result.processing_time_ms >= 0


async def test_request_shape(solid_applicant):
    """Test prompt, schema, and temperature sent to the service"""
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["headers"] = request.headers
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_response(VALID_PAYLOAD))

    await make_client(handler, model="gemini-test").assess(solid_applicant)

    assert captured["url"].endswith("/models/gemini-test:generateContent")
    assert captured["headers"]["x-goog-api-key"] == "test-key"

    config = captured["body"]["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["temperature"] == 0.2
    assert set(config["responseSchema"]["required"]) == {
        "score",
        "riskLevel",
        "recommendedInterestRate",
        "maxApprovedAmount",
        "reasoning",
    }

    prompt = captured["body"]["contents"][0]["parts"][0]["text"]
    assert "senior credit risk analyst" in prompt
    assert '"credit_history_score": 720' in prompt
    assert "Maria González" in prompt


def test_response_schema_risk_labels():
    assert RESPONSE_SCHEMA["properties"]["riskLevel"]["enum"] == ["Low", "Medium", "High", "Critical"]


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Low", RiskLevel.LOW),
        ("Medium", RiskLevel.MEDIUM),
        ("High", RiskLevel.HIGH),
        ("Critical", RiskLevel.CRITICAL),
        ("Severe", RiskLevel.MEDIUM),
        ("", RiskLevel.MEDIUM),
    ],
)
def test_map_risk_label(label, expected):
    assert map_risk_label(label) == expected


async def test_unknown_risk_label_defaults_to_medium(solid_applicant):
    payload = dict(VALID_PAYLOAD, riskLevel="Very High")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=gemini_response(payload))

    result = await make_client(handler).assess(solid_applicant)

    assert result.risk_level == RiskLevel.MEDIUM
    assert result.score == 72


# Service failure


async def test_http_error_returns_degraded_result(solid_applicant):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "internal"}})

    assert_degraded(await make_client(handler).assess(solid_applicant))


async def test_auth_error_returns_degraded_result(solid_applicant):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"message": "API key not valid"}})

    assert_degraded(await make_client(handler).assess(solid_applicant))


async def test_timeout_returns_degraded_result(solid_applicant):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    assert_degraded(await make_client(handler).assess(solid_applicant))


async def test_connection_error_returns_degraded_result(solid_applicant):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert_degraded(await make_client(handler).assess(solid_applicant))


@pytest.mark.parametrize(
    "body",
    [
        {"candidates": []},
        {"promptFeedback": {"blockReason": "SAFETY"}},
        gemini_response(""),
        gemini_response("not json at all"),
        gemini_response({"score": 50}),
        gemini_response(dict(VALID_PAYLOAD, reasoning=[])),
        gemini_response(dict(VALID_PAYLOAD, score=140)),
        gemini_response(dict(VALID_PAYLOAD, maxApprovedAmount=float("inf"))),
        gemini_response(dict(VALID_PAYLOAD, recommendedInterestRate=float("nan"))),
    ],
)
async def test_unusable_payload_returns_degraded_result(solid_applicant, body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    assert_degraded(await make_client(handler).assess(solid_applicant))


async def test_non_json_body_returns_degraded_result(solid_applicant):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy error</html>")

    assert_degraded(await make_client(handler).assess(solid_applicant))


async def test_unexpected_error_returns_degraded_result(solid_applicant):
    client = GeminiClient(api_key="test-key")

    with patch.object(client, "_generate", AsyncMock(side_effect=RuntimeError("boom"))):
        result = await client.assess(solid_applicant)

    assert_degraded(result)


async def test_cancellation_propagates(solid_applicant):
    """Test cancelling an in-flight demo call is not swallowed"""
    client = GeminiClient(demo_delay_seconds=10)
    task = asyncio.create_task(client.assess(solid_applicant))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


def test_parse_response_raises_on_missing_fields():
    with pytest.raises(AIServiceError):
        parse_response(gemini_response({"score": 10, "riskLevel": "Low"}))


def test_parse_response_joins_text_parts():
    text = json.dumps(VALID_PAYLOAD)
    data = {"candidates": [{"content": {"parts": [{"text": text[:10]}, {"text": text[10:]}]}}]}

    payload = parse_response(data)

    assert payload.score == 72


def test_build_request_body_uses_given_temperature(solid_applicant):
    body = build_request_body(solid_applicant, temperature=0.0)
    assert body["generationConfig"]["temperature"] == 0.0


async def test_assess_ai_entry_point(solid_applicant):
    result = await assess_ai(solid_applicant, client=GeminiClient(demo_delay_seconds=0))
    assert result.score == 88
