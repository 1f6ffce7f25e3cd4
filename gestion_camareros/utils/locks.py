"""
Bloqueos por clave para serializar lectura-modificación-escritura
sobre un mismo (pedido, camarero) dentro del proceso.

No detecta conflictos: el segundo escritor espera y gana (última escritura).
"""
import threading
from contextlib import contextmanager, nullcontext
from typing import Dict, Hashable

from ..config import settings


class KeyedLocks:
    """
    Un threading.Lock por clave, creado bajo demanda.
    La entrada se descarta cuando nadie la retiene ni la espera.
    """

    def __init__(self):
        self._locks: Dict[Hashable, list] = {}  # clave -> [lock, usuarios]
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, key: Hashable):
        with self._guard:
            entrada = self._locks.get(key)
            if entrada is None:
                entrada = self._locks[key] = [threading.Lock(), 0]
            entrada[1] += 1
        try:
            with entrada[0]:
                yield
        finally:
            with self._guard:
                entrada[1] -= 1
                if entrada[1] == 0:
                    del self._locks[key]

    def __len__(self):
        return len(self._locks)


def bloqueo(locks, key: Hashable):
    """Context manager de bloqueo, o nulo si no hay serialización configurada"""
    if locks is None:
        return nullcontext()
    return locks.hold(key)


# Instancia global (solo se usa si SERIALIZE_WRITES está activo)
write_locks = KeyedLocks()


def write_locks_if_enabled():
    """Bloqueos globales si SERIALIZE_WRITES está activo; None en caso contrario"""
    return write_locks if settings.SERIALIZE_WRITES else None
