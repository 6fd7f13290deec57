"""
Error taxonomy for the Quran Pro API.

Each error is an ``HTTPException`` so FastAPI renders it as ``{"detail": ...}``
with the matching status code.
"""
from typing import Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for errors raised by the services"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class QuotaExceeded(AppError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = "Message quota exceeded"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class UpstreamFailure(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Upstream service error"


class CompletionFailed(UpstreamFailure):
    default_detail = "Bot interaction failed"


class ServiceUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service unavailable"
