"""Shared API request/response models.

Error envelopes and validation error formatting for the HTTP layer. Domain
models (orders, webhook payloads) live in payments.models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from payments.models.errors import ErrorCode, ErrorResponse

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "ValidationErrorResponse",
    "ValidationErrorDetail",
    "RedirectStatus",
    "format_validation_errors",
]


class ValidationErrorDetail(BaseModel):
    """Detail of a single validation error."""

    model_config = ConfigDict(strict=True)

    loc: list[str] = Field(
        ...,
        description="Path to the field that failed validation",
        examples=[["body", "items", "0", "price"]],
    )
    msg: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Input should be greater than 0"],
    )
    type: str = Field(
        ...,
        description="Error type identifier",
        examples=["greater_than"],
    )


class ValidationErrorResponse(BaseModel):
    """Response format for request validation errors (HTTP 400)."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = ErrorCode.VALIDATION_FAILED.value
    message: str = "Request validation failed"
    recovery: str = "Check the request parameters and try again"
    details: list[ValidationErrorDetail] = Field(default_factory=list)


class RedirectStatus(BaseModel):
    """Body of the checkout success/cancel landing endpoints."""

    ok: bool
    message: str


def format_validation_errors(errors: list[dict[str, Any]]) -> ValidationErrorResponse:
    """Convert Pydantic validation errors to ValidationErrorResponse.

    Args:
        errors: List of error dicts from Pydantic's ValidationError.errors()

    Returns:
        ValidationErrorResponse ready for JSON serialization.
    """
    details = [
        ValidationErrorDetail(
            loc=[str(loc) for loc in error.get("loc", [])],
            msg=str(error.get("msg", "")),
            type=str(error.get("type", "")),
        )
        for error in errors
    ]
    return ValidationErrorResponse(details=details)
