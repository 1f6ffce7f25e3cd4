"""
Limitador de peticiones por ventana fija

La capa de rutas solo conoce la capacidad allow(identifier) -> bool;
el almacenamiento es intercambiable:
- InMemoryRateLimiter: un diccionario por proceso (una sola instancia)
- RedisRateLimiter: contador compartido (varias instancias detrás de un balanceador)
"""
import logging
import time
from threading import Lock
from typing import Callable, Dict, Optional

import redis

from ..config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """Interfaz común de los limitadores"""

    def __init__(self, max_requests: int = 100, window_seconds: int = 60):
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def allow(self, identifier: str) -> bool:
        raise NotImplementedError


class InMemoryRateLimiter(RateLimiter):
    """
    Ventana fija independiente por identificador.

    La ventana arranca con la primera petición del identificador y se
    reinicia cuando vence; no hay temporizadores. Cada `cleanup_interval`
    segundos se descartan las ventanas vencidas.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
        cleanup_interval: Optional[float] = None,
    ):
        super().__init__(max_requests, window_seconds)
        self._clock = clock
        self._windows: Dict[str, Dict[str, float]] = {}
        self._lock = Lock()
        self.cleanup_interval = window_seconds if cleanup_interval is None else cleanup_interval
        self._last_cleanup = clock()

    def _cleanup_expired(self, now: float):
        if now - self._last_cleanup < self.cleanup_interval:
            return
        expired = [k for k, v in self._windows.items() if now > v["reset_at"]]
        for k in expired:
            del self._windows[k]
        if expired:
            logger.debug(f"Eliminadas {len(expired)} ventanas de rate limiting vencidas")
        self._last_cleanup = now

    def allow(self, identifier: str) -> bool:
        now = self._clock()
        with self._lock:
            self._cleanup_expired(now)
            record = self._windows.get(identifier)

            if record is None or now > record["reset_at"]:
                self._windows[identifier] = {"count": 1, "reset_at": now + self.window_seconds}
                return True

            if record["count"] >= self.max_requests:
                return False

            record["count"] += 1
            return True

    def reset(self, identifier: Optional[str] = None):
        with self._lock:
            if identifier is None:
                self._windows.clear()
            else:
                self._windows.pop(identifier, None)

    def __len__(self):
        return len(self._windows)


class RedisRateLimiter(RateLimiter):
    """
    Contador INCR + EXPIRE compartido entre instancias.
    Si Redis no responde se permite la petición (fail-open).
    """

    def __init__(
        self,
        client: redis.Redis,
        max_requests: int = 100,
        window_seconds: int = 60,
        prefix: str = "ratelimit:",
    ):
        super().__init__(max_requests, window_seconds)
        self.client = client
        self.prefix = prefix

    def allow(self, identifier: str) -> bool:
        key = f"{self.prefix}{identifier}"
        try:
            count = self.client.incr(key)
            if count == 1:
                self.client.expire(key, self.window_seconds)
        except redis.RedisError as e:
            logger.warning(f"Redis no disponible para rate limiting, se permite la petición: {e}")
            return True
        return count <= self.max_requests


_limiter: Optional[RateLimiter] = None


def build_rate_limiter() -> RateLimiter:
    """Construye el limitador según RATE_LIMIT_BACKEND"""
    backend = settings.RATE_LIMIT_BACKEND.lower()
    if backend == "redis":
        logger.info("Rate limiting con Redis")
        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
        )
        return RedisRateLimiter(
            client,
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
    if backend != "memory":
        logger.warning(f"RATE_LIMIT_BACKEND desconocido '{backend}', se usa memoria")
    return InMemoryRateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )


def get_rate_limiter() -> RateLimiter:
    """Dependencia de FastAPI: limitador del proceso (se crea una vez)"""
    global _limiter
    if _limiter is None:
        _limiter = build_rate_limiter()
    return _limiter
