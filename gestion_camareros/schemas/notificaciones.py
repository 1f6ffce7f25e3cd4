"""
Schemas de notificaciones: WhatsApp, tokens de confirmación y QR
"""
from pydantic import BaseModel, Field
from typing import Optional


class ConfigWhatsAppResponse(BaseModel):
    """Resultado de la verificación de credenciales de WhatsApp"""
    estado: str = Field(..., description="configured | unconfigured | suspicious-token | duplicate-values")
    configurado: bool
    detalle: str
    longitud_token: int = 0


class EnviarWhatsAppRequest(BaseModel):
    """Envío de un mensaje. Con pedido_id y camarero_id la asignación pasa a 'enviado'."""
    telefono: str = Field(..., min_length=1)
    mensaje: str = Field(..., min_length=1)
    pedido_id: Optional[int] = None
    camarero_id: Optional[int] = None

    class Config:
        json_schema_extra = {
            "example": {
                "telefono": "612 345 678",
                "mensaje": "Hola Lucía, ¿puedes trabajar el 15/03 en Hotel Miramar?",
                "pedido_id": 1,
                "camarero_id": 3
            }
        }


class EnviarWhatsAppResponse(BaseModel):
    message_id: Optional[str] = None
    asignacion_actualizada: bool = False


class TokenConfirmacionCreate(BaseModel):
    """Guarda el token que viaja en los enlaces confirmar/no-confirmar"""
    token: str = Field(..., min_length=8, max_length=64)
    pedido_id: int = Field(..., gt=0)
    camarero_id: int = Field(..., gt=0)
    coordinador_id: Optional[int] = None


class RespuestaEnlaceResponse(BaseModel):
    pedido_id: int
    camarero_id: int
    estado: str
    cliente: str
    lugar: str
    dia_evento: str
    hora_entrada: str
    todos_confirmados: bool = False


class QRTokenCreate(BaseModel):
    pedido_id: int = Field(..., gt=0)
    camarero_id: int = Field(..., gt=0)


class QRTokenResponse(BaseModel):
    token: str
    qr_url: str
