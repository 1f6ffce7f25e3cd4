"""
Modelos de tokens públicos (enlaces que abre el camarero desde el móvil)
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from .database import Base


class TokenConfirmacion(Base):
    """Enlace de un solo uso para confirmar o rechazar un servicio"""

    __tablename__ = "tokens_confirmacion"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(64), unique=True, nullable=False, index=True)
    pedido_id = Column(Integer, ForeignKey("pedidos.id", ondelete="CASCADE"), nullable=False)
    camarero_id = Column(Integer, nullable=False)
    coordinador_id = Column(Integer, nullable=True)
    usado = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class TokenQR(Base):
    """Enlace de autofichaje: un token por (pedido, camarero)"""

    __tablename__ = "tokens_qr"
    __table_args__ = (
        UniqueConstraint("pedido_id", "camarero_id", name="uq_token_qr_pedido_camarero"),
    )

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(32), unique=True, nullable=False, index=True)
    pedido_id = Column(Integer, ForeignKey("pedidos.id", ondelete="CASCADE"), nullable=False)
    camarero_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
