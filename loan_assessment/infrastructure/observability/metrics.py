"""Prometheus metrics for monitoring assessment outcomes, AI availability, and latency"""

from prometheus_client import Counter, Histogram

from loan_assessment.domain.models import AssessmentResult

# Assessment metrics
assessment_counter = Counter(
    "loan_assessment_total",
    "Total assessments produced",
    ["method", "risk_level"],  # TRADITIONAL | AI
)

assessment_duration_histogram = Histogram(
    "assessment_duration_seconds",
    "Assessment processing time",
    ["method"],
    buckets=[0.001, 0.01, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# AI service metrics
ai_outcome_counter = Counter(
    "ai_assessment_outcome_total",
    "AI assessment calls by outcome",
    ["outcome"],  # demo | success | failure
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_assessment(result: AssessmentResult) -> None:
    """Record tier distribution and processing time for one assessment"""
    method = result.method.value
    assessment_counter.labels(method=method, risk_level=result.risk_level.value).inc()
    assessment_duration_histogram.labels(method=method).observe(result.processing_time_ms / 1000)


def record_ai_outcome(outcome: str) -> None:
    ai_outcome_counter.labels(outcome=outcome).inc()
