"""
Modelos de la base de datos
"""
from .database import Base, get_db, engine, SessionLocal
from .cliente import Cliente
from .camarero import Camarero
from .coordinador import Coordinador
from .pedido import Pedido, Asignacion, EstadoAsignacion
from .fichaje import Fichaje
from .token import TokenConfirmacion, TokenQR

__all__ = [
    "Base",
    "get_db",
    "engine",
    "SessionLocal",
    "Cliente",
    "Camarero",
    "Coordinador",
    "Pedido",
    "Asignacion",
    "EstadoAsignacion",
    "Fichaje",
    "TokenConfirmacion",
    "TokenQR",
]
