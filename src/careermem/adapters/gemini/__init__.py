"""Public interface for the Gemini oracle adapter."""

from __future__ import annotations

from .client import GeminiClient, build_request_body, validate_api_key
from .schema import ErrorResponse, GenerateContentResponse
from .translator import parse_citations, parse_oracle_reply

__all__ = [
    "ErrorResponse",
    "GeminiClient",
    "GenerateContentResponse",
    "build_request_body",
    "parse_citations",
    "parse_oracle_reply",
    "validate_api_key",
]
