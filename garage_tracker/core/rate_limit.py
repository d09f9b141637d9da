"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.
Rate limiting slows down credential stuffing against the auth endpoints
and keeps a single client from hammering the record store.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different endpoints
- The limit strings are bound when the endpoint decorators run at import,
  so they come from the environment-derived module settings only; the
  RATE_LIMIT_* values of a Settings passed to create_app() are not used
- IP-based limiting
- create_app() toggles limiter.enabled from Settings.RATE_LIMIT_ENABLED
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from garage_tracker.core.setting import settings

# Initialize rate limiter
# Uses IP address for rate limiting
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Rate limit configurations per endpoint
# Format: "count/period" (e.g., "10/minute" means 10 requests per minute)
RATE_LIMITS = {
    "signup": settings.RATE_LIMIT_SIGNUP,
    "login": settings.RATE_LIMIT_LOGIN,
    "vehicles": settings.RATE_LIMIT_VEHICLES,
}
