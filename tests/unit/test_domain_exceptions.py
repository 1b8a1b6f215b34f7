"""Tests for domain exceptions (error_code, message, details)."""

from donorcrm.domain.exceptions import (
    AutomationActivationException,
    CronAuthenticationException,
    CrmException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    TenantNotFoundException,
    ValidationException,
)


def test_crm_exception_default_error_code() -> None:
    """Base CrmException uses class name as error_code when not provided."""
    exc = CrmException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "CrmException"
    assert exc.details == {}


def test_crm_exception_to_dict() -> None:
    exc = CrmException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {
        "error": "CUSTOM",
        "message": "Oops",
        "details": {"key": "value"},
    }


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid order", field="order")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "order"}
    assert ValidationException("Invalid").details == {}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("automation", "a-123")
    assert exc.message == "automation not found: a-123"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "automation", "resource_id": "a-123"}


def test_tenant_not_found_exception() -> None:
    exc = TenantNotFoundException("t-1")
    assert exc.error_code == "TENANT_NOT_FOUND"
    assert exc.details["tenant_id"] == "t-1"


def test_automation_activation_exception() -> None:
    exc = AutomationActivationException("a-1", "automation has no steps")
    assert exc.error_code == "AUTOMATION_ACTIVATION_ERROR"
    assert "automation has no steps" in exc.message
    assert exc.details == {"automation_id": "a-1", "reason": "automation has no steps"}


def test_cron_authentication_exception() -> None:
    exc = CronAuthenticationException()
    assert exc.error_code == "AUTHENTICATION_ERROR"
    assert exc.message == "Invalid cron key"


def test_sql_not_configured_exception() -> None:
    exc = SqlNotConfiguredException()
    assert exc.error_code == "SERVICE_UNAVAILABLE"
    assert isinstance(exc, CrmException)
