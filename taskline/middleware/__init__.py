"""HTTP middleware: request timeout and request ID.

Applied in taskline.main; order matters (last added = outermost).
"""

from taskline.middleware.request_id import RequestIDMiddleware
from taskline.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "TimeoutMiddleware",
]
