"""
Envoltorio común de las respuestas: { success, data?, error? }
"""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

PATRON_HORA = r"^([01]\d|2[0-3]):[0-5]\d$"


class ApiResponse(BaseModel, Generic[T]):
    """Respuesta estándar de la API"""
    success: bool = Field(True, description="Resultado de la operación")
    data: Optional[T] = Field(None, description="Contenido de la respuesta")
    error: Optional[str] = Field(None, description="Mensaje de error")


class HealthResponse(BaseModel):
    """Schema para health check"""
    status: str = Field(..., description="Estado del servicio")
    service: str = Field(..., description="Nombre del servicio")
    version: str = Field(..., description="Versión del servicio")
    database: str = Field(..., description="Estado de la base de datos")
