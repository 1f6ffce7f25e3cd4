"""
Limitación de peticiones
"""
from .rate_limiter import (
    RateLimiter,
    InMemoryRateLimiter,
    RedisRateLimiter,
    build_rate_limiter,
    get_rate_limiter,
)

__all__ = [
    "RateLimiter",
    "InMemoryRateLimiter",
    "RedisRateLimiter",
    "build_rate_limiter",
    "get_rate_limiter",
]
