"""
Schemas de entidades de referencia: Camarero, Coordinador, Cliente
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class CamareroBase(BaseModel):
    """Schema base de Camarero"""
    nombre: str = Field(..., min_length=1, max_length=255, description="Nombre")
    apellido: Optional[str] = Field(None, max_length=255, description="Apellido")
    telefono: Optional[str] = Field(None, max_length=20, description="Teléfono")
    email: Optional[EmailStr] = Field(None, description="Email")
    activo: bool = Field(True, description="Disponible para asignaciones")
    notas: Optional[str] = Field(None, description="Notas")


class CamareroCreate(CamareroBase):
    """Schema para crear camarero (el número se asigna automáticamente)"""

    class Config:
        json_schema_extra = {
            "example": {
                "nombre": "Lucía",
                "apellido": "Martín",
                "telefono": "612345678",
                "email": "lucia.martin@example.com",
                "activo": True
            }
        }


class CamareroUpdate(BaseModel):
    """Schema para actualizar camarero"""
    nombre: Optional[str] = Field(None, min_length=1, max_length=255)
    apellido: Optional[str] = Field(None, max_length=255)
    telefono: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    activo: Optional[bool] = None
    notas: Optional[str] = None


class CamareroResponse(CamareroBase):
    """Schema para respuesta de camarero"""
    id: int = Field(..., description="ID del camarero")
    numero: int = Field(..., description="Número correlativo")
    created_at: Optional[datetime] = Field(None, description="Fecha de alta")

    class Config:
        from_attributes = True


class CoordinadorBase(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=255)
    telefono: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    activo: bool = True


class CoordinadorCreate(CoordinadorBase):
    pass


class CoordinadorUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1, max_length=255)
    telefono: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    activo: Optional[bool] = None


class CoordinadorResponse(CoordinadorBase):
    id: int
    numero: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClienteBase(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    telefono: Optional[str] = Field(None, max_length=20)
    direccion: Optional[str] = None
    notas: Optional[str] = None


class ClienteCreate(ClienteBase):
    pass


class ClienteUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    telefono: Optional[str] = Field(None, max_length=20)
    direccion: Optional[str] = None
    notas: Optional[str] = None


class ClienteResponse(ClienteBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
