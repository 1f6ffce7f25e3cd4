"""
Errores de dominio del servicio

Cada error lleva el código HTTP con el que lo traduce la capa de rutas
(ver los exception handlers en main.py).
"""
from fastapi import status


class GestionCamarerosError(Exception):
    """Error base de la aplicación"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, mensaje: str):
        super().__init__(mensaje)
        self.mensaje = mensaje


class ValidationError(GestionCamarerosError):
    """Entrada mal formada o duplicada (p. ej. camarero repetido en un pedido)"""

    status_code = status.HTTP_400_BAD_REQUEST


class TransicionInvalida(ValidationError):
    """Cambio de estado no permitido sobre una asignación"""

    def __init__(self, mensaje: str, estado_actual: str, estado_destino: str):
        super().__init__(mensaje)
        self.estado_actual = estado_actual
        self.estado_destino = estado_destino


class NotFound(GestionCamarerosError):
    status_code = status.HTTP_404_NOT_FOUND


class Unauthorized(GestionCamarerosError):
    status_code = status.HTTP_401_UNAUTHORIZED


class RateLimited(GestionCamarerosError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class UpstreamFailure(GestionCamarerosError):
    """Servicio externo (base de datos, WhatsApp, webhook) inaccesible"""

    status_code = status.HTTP_502_BAD_GATEWAY
