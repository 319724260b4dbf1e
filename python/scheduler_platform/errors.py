"""Error taxonomy shared by the proxy endpoint and the scheduling views."""

from __future__ import annotations

from fastapi import status


class SchedulerError(Exception):
    """Base exception for scheduler errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class UpstreamTimeoutError(SchedulerError):
    """Raised when the upstream webhook exceeds the wall-clock ceiling."""

    def __init__(self, message: str = "Upstream request timed out.") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            error_code="UPSTREAM_TIMEOUT",
        )


class TransportError(SchedulerError):
    """Raised when the upstream is unreachable or answers with garbage."""

    def __init__(self, message: str = "Failed to forward to n8n webhook.") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="FORWARDING_FAILED",
        )


class SchedulingValidationError(SchedulerError):
    """Request rejected before any upstream call was made."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error_code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(message=message, status_code=status_code, error_code=error_code)


class MethodNotAllowedError(SchedulingValidationError):
    """Raised for any method other than POST on the proxy endpoint."""

    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(
            message=message,
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            error_code="METHOD_NOT_ALLOWED",
        )


class InvalidPayloadError(SchedulingValidationError):
    """Raised when the inbound body is not valid JSON."""

    def __init__(self, message: str = "Request body must be valid JSON.") -> None:
        super().__init__(message=message, error_code="INVALID_PAYLOAD")


class MissingSelectionError(SchedulingValidationError):
    """Raised when a booking is submitted without all required selections."""

    def __init__(
        self,
        message: str = "Select a candidate, at least one interviewer and a date & time.",
    ) -> None:
        super().__init__(message=message, error_code="MISSING_SELECTION")
