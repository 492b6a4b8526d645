"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from loan_assessment.infrastructure.clients.gemini import GeminiClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ai_client() -> GeminiClient:
    """Provide AI assessment client instance"""
    return GeminiClient()
