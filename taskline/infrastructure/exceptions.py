"""Infrastructure exceptions for storage operations.

Storage errors extend TasklineException so presentation can map them
to HTTP responses consistently.
"""

from taskline.domain.exceptions import TasklineException


class StorageException(TasklineException):
    """Lower-level store failure, surfaced opaquely to callers."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Storage failure during {operation}",
            "STORAGE_ERROR",
            {"operation": operation, "reason": reason},
        )
