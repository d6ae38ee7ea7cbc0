"""
Domain Exceptions

Error taxonomy for the authorization and progress engines. Every public
operation either returns a definite value or raises one of these; the
presentation layer translates them into user-facing messages via
``to_dict()``.
"""

from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    PERMISSION_DENIED = "permission_denied"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    BUSINESS_RULE = "business_rule"
    POST_COMMIT = "post_commit"


DetailValue = str | int | bool | None


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, DetailValue] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class PermissionDeniedError(DomainError):
    """Raised when an actor lacks the capability for (resource, action)."""

    def __init__(
        self,
        actor_role: str,
        resource: str,
        action: str,
        reason: str | None = None,
    ) -> None:
        self.actor_role = actor_role
        self.resource = resource
        self.action = action
        message = f"Role '{actor_role}' may not {action} {resource}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            ErrorType.PERMISSION_DENIED,
            {"role": actor_role, "resource": resource, "action": action},
        )


class ValidationError(DomainError):
    """Raised when input is malformed or a required field is missing."""

    def __init__(
        self,
        field_name: str,
        value: Any,
        message: str,
        error_code: str | None = None,
    ) -> None:
        self.field_name = field_name
        self.value = value
        self.error_code = error_code or "VALIDATION_ERROR"

        super().__init__(
            f"Validation failed for field '{field_name}': {message}",
            ErrorType.VALIDATION,
            {
                "field": field_name,
                "value": str(value) if value is not None else None,
                "error_code": self.error_code,
            },
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "field": self.field_name,
            "value": str(self.value) if self.value is not None else None,
            "message": self.message,
            "error_code": self.error_code,
        }


class ConflictError(DomainError):
    """
    Raised when a progress update was computed from a stale read.

    The caller must re-fetch the current state and may retry; the core
    never retries on its own.
    """

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            message,
            ErrorType.CONFLICT,
            {
                "expected": str(expected) if expected is not None else None,
                "actual": str(actual) if actual is not None else None,
            },
        )


class NotFoundError(DomainError):
    """Raised when a referenced equipment, task or history entry does not exist."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"{entity_type} not found: {entity_id}",
            ErrorType.NOT_FOUND,
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class BusinessRuleError(DomainError):
    """Raised when a well-formed request violates a structural business rule."""

    def __init__(
        self,
        rule_name: str,
        message: str,
        details: dict[str, DetailValue] | None = None,
    ) -> None:
        self.rule_name = rule_name
        rule_details: dict[str, DetailValue] = {"rule": rule_name}
        rule_details.update(details or {})
        super().__init__(
            f"Business rule '{rule_name}' violated: {message}",
            ErrorType.BUSINESS_RULE,
            rule_details,
        )


class PostCommitError(DomainError):
    """
    Raised when a change was committed but a follow-up step failed.

    ``entry`` is the committed record; the caller must not retry the
    write. ``__cause__`` holds the underlying failure.
    """

    def __init__(self, entry: Any, step: str, cause: Exception) -> None:
        self.entry = entry
        self.step = step
        super().__init__(
            f"Change committed but {step} failed: {cause}",
            ErrorType.POST_COMMIT,
            {"step": step, "cause": type(cause).__name__},
        )
