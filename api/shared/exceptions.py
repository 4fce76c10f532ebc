"""Shared exceptions for the math tutor API."""
from typing import Any, Dict, Optional

from fastapi import HTTPException


class TutorException(Exception):
    """Base exception for the math tutor API."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(TutorException):
    """Raised when input validation fails."""

    status_code = 422

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundError(ValidationError):
    """Raised when a referenced resource does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: Any):
        message = f"{resource} with identifier '{identifier}' not found"
        super().__init__(message, {"resource": resource, "identifier": str(identifier)})
        self.error_code = "NOT_FOUND"


class StoreUnavailableError(TutorException):
    """Raised when the durable store cannot be reached."""

    status_code = 503

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        full_message = f"Store unavailable during '{operation}': {message}"
        error_details: Dict[str, Any] = {"operation": operation}
        if details:
            error_details.update(details)
        super().__init__(full_message, "STORE_UNAVAILABLE", error_details)
        self.operation = operation


class InvocationError(TutorException):
    """Raised when the completion provider call does not yield an answer."""

    status_code = 502
    kind: str = "unknown"

    def __init__(
        self,
        message: str,
        model: str,
        error_code: str = "INVOCATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        full_message = f"Completion failed with model '{model}': {message}"
        error_details: Dict[str, Any] = {"model": model, "kind": self.kind}
        if details:
            error_details.update(details)
        super().__init__(full_message, error_code, error_details)
        self.model = model


class InvocationTimeoutError(InvocationError):
    """The provider did not answer within the bounded wait."""

    status_code = 504
    kind = "timeout"

    def __init__(self, model: str, timeout: float):
        super().__init__(
            f"no response within {timeout:g}s",
            model,
            "INVOCATION_TIMEOUT",
            {"timeout_seconds": timeout},
        )


class InvocationTransportError(InvocationError):
    """The provider could not be reached."""

    kind = "transport"

    def __init__(self, model: str, message: str):
        super().__init__(message, model, "INVOCATION_TRANSPORT_ERROR")


class InvocationProviderError(InvocationError):
    """The provider answered with an error."""

    kind = "provider"

    def __init__(self, model: str, message: str, status_code: Optional[int] = None):
        details = {"provider_status": status_code} if status_code is not None else None
        super().__init__(message, model, "INVOCATION_PROVIDER_ERROR", details)
        self.provider_status = status_code


class MalformedCompletionError(InvocationError):
    """The provider answered, but without usable completion text."""

    kind = "malformed"

    def __init__(self, model: str, message: str):
        super().__init__(message, model, "MALFORMED_COMPLETION")


def to_http_exception(exc: TutorException) -> HTTPException:
    """Map a domain exception to an HTTPException with a structured detail."""
    return HTTPException(
        status_code=exc.status_code,
        detail={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )
