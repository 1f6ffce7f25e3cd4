"""
Schemas Pydantic para validación
"""
from .common import ApiResponse, HealthResponse
from .referencias import (
    CamareroCreate,
    CamareroUpdate,
    CamareroResponse,
    CoordinadorCreate,
    CoordinadorUpdate,
    CoordinadorResponse,
    ClienteCreate,
    ClienteUpdate,
    ClienteResponse
)
from .pedido import (
    AsignacionCreate,
    AsignacionEnPedido,
    AsignacionUpdate,
    AsignacionResponse,
    RespuestaAsignacion,
    PedidoCreate,
    PedidoUpdate,
    PedidoResponse
)
from .fichaje import (
    FichajeUpdate,
    FichajeResponse,
    ResumenFichajeResponse,
    ResumenPedidoResponse,
    DuracionResponse,
    FicharResponse
)
from .notificaciones import (
    ConfigWhatsAppResponse,
    EnviarWhatsAppRequest,
    EnviarWhatsAppResponse,
    TokenConfirmacionCreate,
    RespuestaEnlaceResponse,
    QRTokenCreate,
    QRTokenResponse
)

__all__ = [
    "ApiResponse",
    "HealthResponse",
    # Referencias
    "CamareroCreate",
    "CamareroUpdate",
    "CamareroResponse",
    "CoordinadorCreate",
    "CoordinadorUpdate",
    "CoordinadorResponse",
    "ClienteCreate",
    "ClienteUpdate",
    "ClienteResponse",
    # Pedido / Asignación
    "AsignacionCreate",
    "AsignacionEnPedido",
    "AsignacionUpdate",
    "AsignacionResponse",
    "RespuestaAsignacion",
    "PedidoCreate",
    "PedidoUpdate",
    "PedidoResponse",
    # Fichaje
    "FichajeUpdate",
    "FichajeResponse",
    "ResumenFichajeResponse",
    "ResumenPedidoResponse",
    "DuracionResponse",
    "FicharResponse",
    # Notificaciones
    "ConfigWhatsAppResponse",
    "EnviarWhatsAppRequest",
    "EnviarWhatsAppResponse",
    "TokenConfirmacionCreate",
    "RespuestaEnlaceResponse",
    "QRTokenCreate",
    "QRTokenResponse"
]
