"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for the allowlist engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every rejection has its own code so automated clients can tell
"not entitled" from "already redeemed" from "bad root".
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Registry Errors
    UNAUTHORIZED = "UNAUTHORIZED"
    ALREADY_INITIALIZED = "ALREADY_INITIALIZED"
    NOT_INITIALIZED = "NOT_INITIALIZED"

    # Proof Errors
    INVALID_PROOF = "INVALID_PROOF"
    PROOF_TOO_LONG = "PROOF_TOO_LONG"
    INVALID_ENTITLEMENT = "INVALID_ENTITLEMENT"

    # Claim Errors
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    TRANSFER_FAILED = "TRANSFER_FAILED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class AllowlistError(BaseModel):
    """
    Base error model for structured error communication.

    This model is used for passing errors across process boundaries
    (HTTP responses, CLI JSON output) without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_PROOF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class AllowlistException(Exception):
    """
    Base exception for all allowlist engine errors.

    This exception carries structured error information and can be
    converted to/from AllowlistError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "ALLOWLIST_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> AllowlistError:
        """Convert this exception to an AllowlistError model."""
        return AllowlistError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class UnauthorizedException(AllowlistException):
    """Raised when a non-authority identity attempts a root rotation."""

    def __init__(
        self,
        message: str,
        caller: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if caller is not None:
            full_details["caller"] = caller
        super().__init__(
            message=message,
            code=ErrorCodes.UNAUTHORIZED,
            details=full_details,
            retryable=False,
        )


class AlreadyInitializedException(AllowlistException):
    """Raised when a registry is initialized a second time."""

    def __init__(
        self,
        message: str = "Root registry is already initialized",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ALREADY_INITIALIZED,
            details=details,
            retryable=False,
        )


class NotInitializedException(AllowlistException):
    """Raised when the registry is read or rotated before initialization."""

    def __init__(
        self,
        message: str = "Root registry has not been initialized",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.NOT_INITIALIZED,
            details=details,
            retryable=False,
        )


class InvalidProofException(AllowlistException):
    """Raised when a leaf and proof do not fold to the current root."""

    def __init__(
        self,
        message: str,
        beneficiary: str | None = None,
        version: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if beneficiary is not None:
            full_details["beneficiary"] = beneficiary
        if version is not None:
            full_details["version"] = version
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PROOF,
            details=full_details,
            retryable=False,
        )


class ProofTooLongException(AllowlistException):
    """Raised when a proof exceeds the configured maximum depth."""

    def __init__(
        self,
        length: int,
        max_depth: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["length"] = length
        full_details["max_depth"] = max_depth
        super().__init__(
            message=f"Proof has {length} elements, maximum is {max_depth}",
            code=ErrorCodes.PROOF_TOO_LONG,
            details=full_details,
            retryable=False,
        )


class InvalidEntitlementException(AllowlistException):
    """Raised when an entitlement cannot be serialized under the active leaf scheme."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_ENTITLEMENT,
            details=full_details,
            retryable=False,
        )


class AlreadyClaimedException(AllowlistException):
    """Raised when a (version, beneficiary) pair has already redeemed."""

    def __init__(
        self,
        beneficiary: str,
        version: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["beneficiary"] = beneficiary
        full_details["version"] = version
        super().__init__(
            message=f"Already claimed for merkle root version {version}",
            code=ErrorCodes.ALREADY_CLAIMED,
            details=full_details,
            retryable=False,
        )


class TransferFailedException(AllowlistException):
    """
    Raised when the value-transfer collaborator fails.

    The claim mark is rolled back before this is raised, so callers may retry.
    """

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if reason:
            full_details["reason"] = reason
        super().__init__(
            message=message,
            code=ErrorCodes.TRANSFER_FAILED,
            details=full_details,
            retryable=True,
        )

