"""
API Error Handling

Standardized error handling for the API.
Engine exceptions keep their codes; only the HTTP status is chosen here.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from allowlist.schemas.errors import AllowlistException, ErrorCodes
from api.models.responses import ErrorResponse, ErrorDetail


# HTTP status for each engine error code
STATUS_BY_CODE: dict[str, int] = {
    ErrorCodes.UNAUTHORIZED: 403,
    ErrorCodes.ALREADY_INITIALIZED: 409,
    ErrorCodes.NOT_INITIALIZED: 409,
    ErrorCodes.INVALID_PROOF: 400,
    ErrorCodes.PROOF_TOO_LONG: 400,
    ErrorCodes.INVALID_ENTITLEMENT: 422,
    ErrorCodes.ALREADY_CLAIMED: 409,
    ErrorCodes.TRANSFER_FAILED: 502,
}


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


class InvalidRequestError(APIError):
    """Invalid request parameters."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_REQUEST",
            message=message,
            status_code=400,
            details=details,
        )


class MissingIdentityError(APIError):
    """No authenticated caller identity on the request."""

    def __init__(self, message: str = "X-Caller-Identity header is required"):
        super().__init__(
            code="MISSING_IDENTITY",
            message=message,
            status_code=401,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def allowlist_error_handler(request: Request, exc: AllowlistException) -> JSONResponse:
    """Handle engine exceptions, preserving their code and retryable flag."""
    error = exc.to_error_model()
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, 400),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(**error.model_dump()),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
