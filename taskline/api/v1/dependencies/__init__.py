"""Presentation-layer dependency injection (composition root).

Routes depend only on these dependencies, never on repositories directly.
"""

from taskline.api.v1.dependencies.identity import get_current_user_id
from taskline.api.v1.dependencies.tasks import (
    build_lifecycle_service,
    get_dependency_service,
    get_lifecycle_service,
    get_query_service,
)

__all__ = [
    "build_lifecycle_service",
    "get_current_user_id",
    "get_dependency_service",
    "get_lifecycle_service",
    "get_query_service",
]
