"""
Modelo de Fichaje (registro de entrada/salida)
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from .database import Base


class Fichaje(Base):
    """
    Entrada/salida de un camarero en un pedido.
    Se conserva aunque se elimine la asignación o el pedido (histórico para nóminas).
    """

    __tablename__ = "fichajes"
    __table_args__ = (
        UniqueConstraint("pedido_id", "camarero_id", name="uq_fichaje_pedido_camarero"),
    )

    id = Column(Integer, primary_key=True, index=True)
    pedido_id = Column(Integer, nullable=False, index=True)
    camarero_id = Column(Integer, nullable=False, index=True)
    camarero_nombre = Column(String(255), nullable=True)

    entrada = Column(DateTime(timezone=True), nullable=True)
    salida = Column(DateTime(timezone=True), nullable=True)
    nota = Column(String(100), nullable=False, default="")

    editado_manualmente = Column(Boolean, default=False, nullable=False)
    editado_en = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Fichaje(pedido={self.pedido_id}, camarero={self.camarero_id}, entrada={self.entrada}, salida={self.salida})>"
