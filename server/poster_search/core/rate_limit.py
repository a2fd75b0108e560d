"""Rate limiting for the public search endpoint using slowapi."""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from poster_search.core.config import get_settings

RETRY_AFTER_SECONDS = 60

# Keyed on the direct peer address; the proxy in front is expected to pass it through.
limiter = Limiter(key_func=get_remote_address, enabled=get_settings().is_rate_limit_enabled)


def search_rate_limit() -> str:
    return f"{get_settings().search_rate_limit_per_minute}/minute"


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Return a JSON 429 with a Retry-After hint."""
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "retry_after": RETRY_AFTER_SECONDS,
        },
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )
