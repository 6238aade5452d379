"""
Per-client request limits for the todo API.

Reads and writes get separate budgets, keyed by client address. Limits
come from settings and are disabled outright when RATE_LIMIT_ENABLED is
false (the test suite does this).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.setting import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# slowapi limit strings, e.g. "30/minute"
RATE_LIMITS = {
    "read": settings.RATE_LIMIT_READ,
    "write": settings.RATE_LIMIT_WRITE,
}
