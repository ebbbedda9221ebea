"""
Centralized exception hierarchy for Estate Admin.

The API client raises these; the resource layer converts them into
user-visible messages so nothing reaches the UI as a raw traceback.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# Base Exception
# =============================================================================


class EstateAdminError(RuntimeError):
    """
    Base exception for all Estate Admin errors.

    Attributes:
        message: Human-readable error message.
        detail: Additional error details (optional).
        error_code: Machine-readable error code.
        request_id: Unique identifier for the request (optional).
    """

    def __init__(
        self,
        message: str,
        *,
        detail: str | None = None,
        error_code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.error_code = error_code or self._default_error_code()
        self.request_id = request_id or self._generate_request_id()

    def _default_error_code(self) -> str:
        """Generate default error code from class name."""
        return f"estate_admin_{self.__class__.__name__.lower()}"

    def _generate_request_id(self) -> str:
        """Generate request ID if not provided."""
        return str(uuid.uuid4())

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable error payload."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        if self.request_id:
            result["request_id"] = self.request_id
        return result

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message

    def log(self, level: int = logging.ERROR) -> None:
        """Log the exception with structured data."""
        logger.log(
            level,
            self.message,
            extra={
                "error_code": self.error_code,
                "detail": self.detail,
                "request_id": self.request_id,
                "exception_type": self.__class__.__name__,
            },
        )


# =============================================================================
# Input Validation Errors
# =============================================================================


class ValidationError(EstateAdminError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        detail: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.field = field
        full_message = f"{field}: {message}" if field else message
        super().__init__(
            full_message,
            detail=detail,
            error_code="validation_error",
            request_id=request_id,
        )


class InvalidStatusError(ValidationError):
    """Raised when a status value is not one of pending/approved/rejected."""

    def __init__(
        self,
        status: Any,
        *,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            message="Invalid status",
            field="status",
            detail=f"Expected pending, approved or rejected: {status!r}",
            request_id=request_id,
        )
        self.status = status


class InvalidTransitionError(ValidationError):
    """Raised when a record cannot move to the requested status."""

    def __init__(
        self,
        record_id: Any,
        current: str,
        target: str,
        *,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            message="Status change not allowed",
            field="status",
            detail=f"Record {record_id!r} cannot move from {current} to {target}",
            request_id=request_id,
        )
        self.record_id = record_id
        self.current = current
        self.target = target


# =============================================================================
# Not Found Errors
# =============================================================================


class NotFoundError(EstateAdminError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        message: str,
        *,
        resource_type: str | None = None,
        resource_id: Any = None,
        request_id: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        detail = None
        if resource_type and resource_id is not None:
            detail = f"{resource_type} with ID {resource_id!r} not found"
        super().__init__(
            message,
            detail=detail,
            error_code="not_found",
            request_id=request_id,
        )


class RecordNotFoundError(NotFoundError):
    """Raised when a record id is not in the loaded list."""

    def __init__(
        self,
        resource_type: str,
        record_id: Any,
        *,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            message=f"{resource_type} not found",
            resource_type=resource_type,
            resource_id=record_id,
            request_id=request_id,
        )
        self.record_id = record_id


# =============================================================================
# External API Errors
# =============================================================================


class ExternalAPIError(EstateAdminError):
    """
    Raised when the backend API fails.

    Attributes:
        endpoint: Path of the endpoint that failed.
        status_code: HTTP status code, when a response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str | None = None,
        status_code: int | None = None,
        detail: str | None = None,
        error_code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        if detail is None:
            detail_parts = []
            if endpoint:
                detail_parts.append(f"Endpoint: {endpoint}")
            if status_code is not None:
                detail_parts.append(f"HTTP {status_code}")
            detail = "; ".join(detail_parts) if detail_parts else None
        super().__init__(
            message,
            detail=detail,
            error_code=error_code or "external_api_error",
            request_id=request_id,
        )


class APIConnectionError(ExternalAPIError):
    """Raised when the backend cannot be reached."""

    def __init__(
        self,
        endpoint: str,
        *,
        reason: str | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            "Could not connect to the server",
            endpoint=endpoint,
            detail=reason,
            error_code="api_connection_error",
            request_id=request_id,
        )


class APITimeoutError(ExternalAPIError):
    """Raised when a backend call times out."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_seconds: float | None = None,
        request_id: str | None = None,
    ) -> None:
        detail = f"Timed out after {timeout_seconds}s" if timeout_seconds else None
        super().__init__(
            "The server took too long to respond",
            endpoint=endpoint,
            detail=detail,
            error_code="api_timeout",
            request_id=request_id,
        )
        self.timeout_seconds = timeout_seconds


class AuthenticationError(ExternalAPIError):
    """Raised when the backend rejects the admin credentials."""

    def __init__(
        self,
        endpoint: str,
        *,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            "Not authorized. Check the admin token",
            endpoint=endpoint,
            status_code=status_code,
            error_code="authentication_error",
            request_id=request_id,
        )


class MalformedResponseError(ExternalAPIError):
    """Raised when a response body is not the expected JSON envelope."""

    def __init__(
        self,
        endpoint: str,
        *,
        reason: str | None = None,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            "Unexpected response from the server",
            endpoint=endpoint,
            status_code=status_code,
            detail=reason,
            error_code="malformed_response",
            request_id=request_id,
        )


class OperationFailedError(ExternalAPIError):
    """Raised when the backend answers with ``success: false``."""

    def __init__(
        self,
        endpoint: str,
        *,
        reason: str | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            reason or "The server reported a failure",
            endpoint=endpoint,
            detail=f"Endpoint: {endpoint}",
            error_code="operation_failed",
            request_id=request_id,
        )
        self.reason = reason


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(EstateAdminError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        request_id: str | None = None,
    ) -> None:
        self.config_key = config_key
        detail = f"Configuration key: {config_key}" if config_key else None
        super().__init__(
            message,
            detail=detail,
            error_code="configuration_error",
            request_id=request_id,
        )


class MissingCredentialsError(ConfigurationError):
    """Raised when an authenticated endpoint is called without a token."""

    def __init__(
        self,
        endpoint: str,
        *,
        request_id: str | None = None,
    ) -> None:
        super().__init__(
            "An admin token is required for this action",
            config_key="ESTATE_ADMIN_TOKEN",
            request_id=request_id,
        )
        self.endpoint = endpoint


# =============================================================================
# Helpers
# =============================================================================


def user_message(exc: Exception) -> str:
    """
    Convert any exception into a short message suitable for a notification.

    Args:
        exc: The exception to describe.

    Returns:
        Message text without internal details.
    """
    if isinstance(exc, EstateAdminError):
        return exc.message

    logger.error(
        "Unhandled exception",
        extra={
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=True,
    )
    return "An unexpected error occurred"
