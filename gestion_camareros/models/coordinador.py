"""
Modelo de Coordinador
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from .database import Base


class Coordinador(Base):
    """Contacto administrativo que recibe los avisos de confirmación y fichaje"""

    __tablename__ = "coordinadores"

    id = Column(Integer, primary_key=True, index=True)
    numero = Column(Integer, unique=True, nullable=False, index=True)
    nombre = Column(String(255), nullable=False)
    telefono = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    activo = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Coordinador(id={self.id}, nombre={self.nombre})>"
