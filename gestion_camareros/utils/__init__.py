"""
Utilidades del servicio
"""
from .auth import get_current_user, require_function_secret, rate_limit
from .locks import KeyedLocks, bloqueo, write_locks, write_locks_if_enabled

__all__ = [
    "get_current_user",
    "require_function_secret",
    "rate_limit",
    "KeyedLocks",
    "bloqueo",
    "write_locks",
    "write_locks_if_enabled",
]
