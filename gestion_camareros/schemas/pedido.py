"""
Schemas de Pedido y Asignación
"""
from pydantic import BaseModel, Field, computed_field
from typing import Optional, List, Literal
from datetime import date, datetime

from ..models import EstadoAsignacion
from ..utils.horarios import camareros_necesarios as sumar_turnos, porcentaje_confirmacion as porcentaje
from .common import PATRON_HORA


class AsignacionCreate(BaseModel):
    """Schema para asignar un camarero a un pedido"""
    camarero_id: int = Field(..., gt=0, description="ID del camarero")
    camarero_nombre: Optional[str] = Field(None, max_length=255, description="Nombre a mostrar (por defecto el del camarero)")
    camarero_numero: Optional[int] = Field(None, description="Número a mostrar (por defecto el del camarero)")
    turno: Optional[Literal[1, 2]] = Field(None, description="Turno del pedido")
    hora_entrada: Optional[str] = Field(None, pattern=PATRON_HORA)
    hora_salida: Optional[str] = Field(None, pattern=PATRON_HORA)

    class Config:
        json_schema_extra = {
            "example": {
                "camarero_id": 3,
                "turno": 1
            }
        }


class AsignacionEnPedido(BaseModel):
    """
    Asignación tal como llega al editar el pedido completo.
    Sin estado se conserva el actual (pendiente si el camarero es nuevo).
    """
    camarero_id: int = Field(..., gt=0)
    camarero_nombre: str = Field(..., min_length=1, max_length=255)
    camarero_numero: Optional[int] = None
    estado: Optional[EstadoAsignacion] = None
    turno: Optional[Literal[1, 2]] = None
    hora_entrada: Optional[str] = Field(None, pattern=PATRON_HORA)
    hora_salida: Optional[str] = Field(None, pattern=PATRON_HORA)


class AsignacionUpdate(BaseModel):
    """Edición del operador. estado solo admite 'pendiente' (restablecer)."""
    estado: Optional[Literal["pendiente"]] = None
    turno: Optional[Literal[1, 2]] = None
    hora_entrada: Optional[str] = Field(None, pattern=PATRON_HORA)
    hora_salida: Optional[str] = Field(None, pattern=PATRON_HORA)


class RespuestaAsignacion(BaseModel):
    """Respuesta del camarero registrada a mano o por webhook"""
    resultado: Literal["confirmado", "no confirmado"]

    class Config:
        json_schema_extra = {"example": {"resultado": "confirmado"}}


class AsignacionResponse(BaseModel):
    """Schema para respuesta de asignación"""
    pedido_id: int
    camarero_id: int
    camarero_numero: Optional[int] = None
    camarero_nombre: str
    estado: EstadoAsignacion
    turno: Optional[int] = None
    hora_entrada: Optional[str] = None
    hora_salida: Optional[str] = None

    class Config:
        from_attributes = True


class PedidoBase(BaseModel):
    """Schema base de Pedido"""
    numero: Optional[str] = Field(None, max_length=50)
    cliente: str = Field(..., min_length=1, max_length=255, description="Nombre del cliente")
    lugar: str = Field(..., min_length=1, max_length=255, description="Lugar del evento")
    ubicacion: Optional[str] = None
    dia_evento: date = Field(..., description="Fecha del evento (YYYY-MM-DD)")

    cantidad_camareros: int = Field(..., ge=0, description="Camareros del turno 1")
    hora_entrada: str = Field(..., pattern=PATRON_HORA)
    hora_salida: Optional[str] = Field(None, pattern=PATRON_HORA)

    cantidad_camareros_2: int = Field(0, ge=0, description="Camareros del turno 2")
    hora_entrada_2: Optional[str] = Field(None, pattern=PATRON_HORA)
    hora_salida_2: Optional[str] = Field(None, pattern=PATRON_HORA)

    catering: bool = False
    tiempo_viaje: Optional[int] = Field(None, ge=0, description="Minutos de viaje")
    camisa: Literal["blanca", "negra"] = "blanca"
    notas: Optional[str] = None
    coordinador_id: Optional[int] = None
    webhook_nominas: Optional[str] = None


class PedidoCreate(PedidoBase):
    """Schema para crear pedido"""
    asignaciones: List[AsignacionEnPedido] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "numero": "2024-031",
                "cliente": "Hotel Miramar",
                "lugar": "Salón Mediterráneo",
                "dia_evento": "2024-03-15",
                "cantidad_camareros": 6,
                "hora_entrada": "18:00",
                "hora_salida": "23:30",
                "catering": True,
                "camisa": "negra",
                "asignaciones": []
            }
        }


class PedidoUpdate(BaseModel):
    """Schema para actualizar pedido. Si llega `asignaciones` sustituye la secuencia."""
    numero: Optional[str] = Field(None, max_length=50)
    cliente: Optional[str] = Field(None, min_length=1, max_length=255)
    lugar: Optional[str] = Field(None, min_length=1, max_length=255)
    ubicacion: Optional[str] = None
    dia_evento: Optional[date] = None
    cantidad_camareros: Optional[int] = Field(None, ge=0)
    hora_entrada: Optional[str] = Field(None, pattern=PATRON_HORA)
    hora_salida: Optional[str] = Field(None, pattern=PATRON_HORA)
    cantidad_camareros_2: Optional[int] = Field(None, ge=0)
    hora_entrada_2: Optional[str] = Field(None, pattern=PATRON_HORA)
    hora_salida_2: Optional[str] = Field(None, pattern=PATRON_HORA)
    catering: Optional[bool] = None
    tiempo_viaje: Optional[int] = Field(None, ge=0)
    camisa: Optional[Literal["blanca", "negra"]] = None
    notas: Optional[str] = None
    coordinador_id: Optional[int] = None
    webhook_nominas: Optional[str] = None
    asignaciones: Optional[List[AsignacionEnPedido]] = None


class PedidoResponse(PedidoBase):
    """Schema para respuesta de pedido con indicadores de cobertura"""
    id: int
    asignaciones: List[AsignacionResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def camareros_necesarios(self) -> int:
        return sumar_turnos(self.cantidad_camareros, self.cantidad_camareros_2)

    @computed_field
    @property
    def confirmados(self) -> int:
        return sum(1 for a in self.asignaciones if a.estado == EstadoAsignacion.CONFIRMADO)

    @computed_field
    @property
    def porcentaje_confirmacion(self) -> int:
        return porcentaje(self.camareros_necesarios, self.confirmados)

    @computed_field
    @property
    def completo(self) -> bool:
        return bool(self.asignaciones) and self.confirmados >= self.camareros_necesarios
