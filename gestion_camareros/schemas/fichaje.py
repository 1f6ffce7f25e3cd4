"""
Schemas de Fichaje
"""
from pydantic import BaseModel, Field, computed_field
from typing import List, Optional
from datetime import datetime

from ..services.fichajes import (
    EstadoFichaje, MAX_LONGITUD_NOTA, calcular_duracion, estado_fichaje, formatear_duracion
)


class FichajeUpdate(BaseModel):
    """
    Edición manual. Solo se aplican los campos enviados;
    null en entrada/salida borra la hora registrada.
    """
    entrada: Optional[datetime] = Field(None, description="Hora de entrada")
    salida: Optional[datetime] = Field(None, description="Hora de salida")
    nota: Optional[str] = Field(None, max_length=MAX_LONGITUD_NOTA, description="Nota del coordinador")

    class Config:
        json_schema_extra = {
            "example": {
                "entrada": "2024-03-15T18:00:00Z",
                "salida": None,
                "nota": "llegó tarde"
            }
        }


class FichajeResponse(BaseModel):
    """Schema para respuesta de fichaje"""
    pedido_id: int
    camarero_id: int
    camarero_nombre: Optional[str] = None
    entrada: Optional[datetime] = None
    salida: Optional[datetime] = None
    nota: str = ""
    editado_manualmente: bool = False
    editado_en: Optional[datetime] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def estado(self) -> EstadoFichaje:
        return estado_fichaje(self)

    @computed_field
    @property
    def duracion(self) -> str:
        return formatear_duracion(calcular_duracion(self.entrada, self.salida))


class DuracionResponse(BaseModel):
    horas: int
    minutos: int
    duracion: str


class ResumenFichajeResponse(BaseModel):
    """Duración trabajada por camarero"""
    camarero_id: int
    camarero_nombre: str
    horas: int
    minutos: int
    duracion: str


class ResumenPedidoResponse(BaseModel):
    """Resumen del pedido: horas por camarero y total del equipo"""
    camareros: List[ResumenFichajeResponse]
    total: DuracionResponse


class FicharResponse(BaseModel):
    """Resultado del escaneo del QR de fichaje"""
    accion: str = Field(..., description="entrada | salida | ya_completo")
    fichaje: FichajeResponse
