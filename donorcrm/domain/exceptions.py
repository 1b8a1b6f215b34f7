"""Domain exceptions for the donorcrm application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CrmException(Exception):
    """Base exception for all donorcrm application errors.

    Presentation layer maps these to HTTP responses using message,
    error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the API exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CrmException):
    """Raised when input validation fails (e.g. step order gap, negative delay)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class TenantNotFoundException(CrmException):
    """Raised when a requested tenant is not found."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"Tenant not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class ResourceNotFoundException(CrmException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'automation', 'automation_execution').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AutomationActivationException(CrmException):
    """Raised when activating an automation that cannot run (e.g. no steps)."""

    def __init__(self, automation_id: str, reason: str) -> None:
        super().__init__(
            f"Cannot activate automation {automation_id}: {reason}",
            "AUTOMATION_ACTIVATION_ERROR",
            {"automation_id": automation_id, "reason": reason},
        )


class CronAuthenticationException(CrmException):
    """Raised when a cron invocation carries a missing or wrong secret."""

    def __init__(self) -> None:
        super().__init__("Invalid cron key", "AUTHENTICATION_ERROR")


class SqlNotConfiguredException(CrmException):
    """Raised when an operation requires Postgres but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
