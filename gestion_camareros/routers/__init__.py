"""
Routers de la API
"""
from .referencias import router as referencias_router
from .pedidos import router as pedidos_router
from .fichajes import router as fichajes_router
from .notificaciones import router as notificaciones_router
from .informes import router as informes_router
from .enlaces import router as enlaces_router

__all__ = [
    "referencias_router",
    "pedidos_router",
    "fichajes_router",
    "notificaciones_router",
    "informes_router",
    "enlaces_router"
]
