"""
Clientes para servicios externos
"""
from .whatsapp_client import whatsapp_client, formatear_telefono
from .nominas_client import nominas_client

__all__ = [
    "whatsapp_client",
    "formatear_telefono",
    "nominas_client",
]
