# PUBLIC_INTERFACE
"""
Error types and unified error response models.
"""
from __future__ import annotations

from typing import Dict, Tuple

from fastapi import HTTPException, status
from pydantic import BaseModel, Field

from .outcomes import Failure, Outcome


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Standard error envelope with a stable code."""
    status: str = Field(default="error", description="Always 'error'")
    code: str = Field(..., description="Stable error code")
    message: str = Field(..., description="Human readable error message")


class ErrorCode:
    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    DECRYPTION_FAILED = "DECRYPTION_FAILED"
    INTERNAL = "INTERNAL"


# Failure -> (HTTP status, error code)
_FAILURE_MAP: Dict[Failure, Tuple[int, str]] = {
    Failure.INPUT_VALIDATION: (status.HTTP_400_BAD_REQUEST, ErrorCode.VALIDATION),
    Failure.NOT_FOUND: (status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND),
    Failure.AUTHORIZATION_FAILURE: (status.HTTP_403_FORBIDDEN, ErrorCode.FORBIDDEN),
    Failure.DECRYPTION_FAILURE: (status.HTTP_400_BAD_REQUEST, ErrorCode.DECRYPTION_FAILED),
    Failure.MALFORMED_TOKEN: (status.HTTP_400_BAD_REQUEST, ErrorCode.DECRYPTION_FAILED),
    Failure.AUTHENTICATION_FAILURE: (status.HTTP_400_BAD_REQUEST, ErrorCode.DECRYPTION_FAILED),
    Failure.PAYLOAD_CORRUPT: (status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.INTERNAL),
}


# PUBLIC_INTERFACE
def http_error(status_code: int, code: str, message: str) -> HTTPException:
    """Create HTTPException with a unified error response body."""
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(status="error", code=code, message=message).model_dump(),
    )


# PUBLIC_INTERFACE
def outcome_error(outcome: Outcome) -> HTTPException:
    """Translate a failed Outcome into an HTTPException for the routes."""
    if outcome.failure is None:
        raise ValueError("outcome_error called with a successful outcome")
    status_code, code = _FAILURE_MAP[outcome.failure]
    return http_error(status_code, code, outcome.message)
