"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from loan_assessment.config import settings
from loan_assessment.domain.models import AssessmentResult


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_assessment(request_id: str, applicant_id: str, result: AssessmentResult) -> None:
    """Log structured assessment outcome for method comparison"""
    logging.info(
        "Assessment completed",
        extra={
            "request_id": request_id,
            "applicant_id": applicant_id,
            "step": "assessment_complete",
            "method": result.method.value,
            "score": result.score,
            "risk_level": result.risk_level.value,
            "duration_ms": result.processing_time_ms,
        },
    )
