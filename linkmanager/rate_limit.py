"""Rate limiter factory.

The limiter is stored on ``app.state.limiter`` where ``SlowAPIMiddleware``
picks it up. ``rate_limit_default`` applies to every route the application
does not exempt; the read endpoints are exempted in ``create_application``.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from linkmanager.config import Settings


def _get_client_ip(request: Request) -> str:
    """Extract the real client IP, respecting X-Forwarded-For behind a proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # First entry is the original client; proxies append their own.
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def create_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=_get_client_ip,
        default_limits=[settings.rate_limit_default],
        enabled=settings.rate_limit_enabled,
    )
