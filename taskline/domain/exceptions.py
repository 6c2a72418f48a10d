"""Domain exceptions for the Taskline application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class TasklineException(Exception):
    """Base exception for all Taskline application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, task_id).
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
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TasklineException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(TasklineException):
    """Raised when a requested resource (other than a task transition target) is not found."""

    def __init__(self, resource_type: str, resource_id: int | str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'rule', 'project').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class NotFoundOrConflictException(TasklineException):
    """Raised when a task is missing or the presented version is stale.

    The two causes are not distinguished: a guarded update that affects zero
    rows says nothing about which of them happened. Clients re-read and retry.
    """

    def __init__(self, task_id: int, version: int | None = None) -> None:
        details: dict[str, Any] = {"task_id": task_id}
        if version is not None:
            details["version"] = version
        super().__init__(
            f"Task {task_id} not found or was modified by another request; reload and retry.",
            "TASK_NOT_FOUND_OR_CONFLICT",
            details,
        )


class InvalidReferenceException(TasklineException):
    """Raised when a foreign reference (task type, project, card, task) does not resolve."""

    def __init__(self, field: str, value: Any) -> None:
        """Initialize with the offending field and value.

        Args:
            field: Name of the reference (e.g. 'type_id', 'card_id').
            value: The value that did not resolve.
        """
        super().__init__(
            f"Invalid reference: {field}={value}",
            "INVALID_REFERENCE",
            {"field": field, "value": value},
        )


class InvalidTransitionException(TasklineException):
    """Raised when an operation is not valid for the task's current state."""

    def __init__(
        self,
        task_id: int,
        operation: str,
        from_state: str,
        reason: str | None = None,
    ) -> None:
        """Initialize with transition context.

        Args:
            task_id: Task the operation targeted.
            operation: Attempted operation (e.g. 'complete').
            from_state: Wire name of the current state (e.g. 'completed').
            reason: Optional machine-readable reason (e.g. 'not_claimant').
        """
        details: dict[str, Any] = {
            "task_id": task_id,
            "operation": operation,
            "from_state": from_state,
        }
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Cannot {operation} task {task_id} in state '{from_state}'",
            "INVALID_TRANSITION",
            details,
        )
