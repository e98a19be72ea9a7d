"""API request and response models."""

from api.models.requests import (
    ClaimRequest,
    InitializeRequest,
    RotateRequest,
    VerifyRequest,
)
from api.models.responses import (
    ClaimResponse,
    ClaimStatusResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    RootHistoryResponse,
    RootRecordInfo,
    RootResponse,
    VerifyResponse,
)

__all__ = [
    "InitializeRequest",
    "RotateRequest",
    "VerifyRequest",
    "ClaimRequest",
    "HealthResponse",
    "RootResponse",
    "RootRecordInfo",
    "RootHistoryResponse",
    "VerifyResponse",
    "ClaimResponse",
    "ClaimStatusResponse",
    "ErrorDetail",
    "ErrorResponse",
]
