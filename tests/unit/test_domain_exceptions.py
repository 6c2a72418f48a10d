"""Domain exception payloads and HTTP status mapping."""

from taskline.core.exception_handlers import status_for
from taskline.domain.exceptions import (
    InvalidReferenceException,
    InvalidTransitionException,
    NotFoundOrConflictException,
    ResourceNotFoundException,
    TasklineException,
    ValidationException,
)
from taskline.infrastructure.exceptions import StorageException


def test_base_exception_to_dict_defaults_error_code_to_class_name() -> None:
    exc = TasklineException("boom")
    assert exc.to_dict() == {"error": "TasklineException", "message": "boom", "details": {}}


def test_not_found_or_conflict_carries_task_and_version() -> None:
    exc = NotFoundOrConflictException(10, version=3)
    assert exc.error_code == "TASK_NOT_FOUND_OR_CONFLICT"
    assert exc.details == {"task_id": 10, "version": 3}


def test_invalid_transition_details() -> None:
    exc = InvalidTransitionException(10, "complete", "completed")
    assert exc.details == {"task_id": 10, "operation": "complete", "from_state": "completed"}
    assert "reason" not in exc.details


def test_status_mapping() -> None:
    assert status_for(NotFoundOrConflictException(1)) == 409
    assert status_for(InvalidTransitionException(1, "claim", "completed")) == 422
    assert status_for(InvalidReferenceException("type_id", 99)) == 422
    assert status_for(ValidationException("bad", field="priority")) == 400
    assert status_for(ResourceNotFoundException("rule", 3)) == 404
    assert status_for(StorageException("claim", "OperationalError")) == 500
