"""Rate limiter instance for SlowAPI.

Lives in the HTTP layer only; the lifecycle engine never sees it. Shared so
main (app.state.limiter) and route modules use one instance.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

WRITE_ENDPOINT_LIMIT = "120/minute"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
