"""
Per-client rate limits for the scenario API.

Every route gets RATE_LIMIT_DEFAULT. Slug lookups that decode untrusted input
and can lead to content generation (/check, /related) are decorated with the
stricter RATE_LIMIT_SCENARIO.
"""
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from scenario_engine.config import settings


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri="memory://",
)

# Decorator for routes that parse scenario slugs
scenario_limit = limiter.limit(settings.RATE_LIMIT_SCENARIO)


def setup_rate_limiting(app):
    """Attach the limiter, its 429 handler and the default-limit middleware."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
