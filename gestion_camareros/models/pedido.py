"""
Modelos de Pedido y Asignación

Un pedido es la reserva de personal para un evento; sus asignaciones forman
una secuencia ordenada (posicion) de camareros, cada uno con su estado de
confirmación.
"""
import enum

from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, Text, ForeignKey,
    Enum, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .database import Base


class EstadoAsignacion(str, enum.Enum):
    PENDIENTE = "pendiente"
    ENVIADO = "enviado"
    CONFIRMADO = "confirmado"
    NO_CONFIRMADO = "no confirmado"


class Pedido(Base):
    """Pedido (evento) con uno o dos turnos"""

    __tablename__ = "pedidos"

    id = Column(Integer, primary_key=True, index=True)
    numero = Column(String(50), nullable=True, index=True)
    cliente = Column(String(255), nullable=False, index=True)
    lugar = Column(String(255), nullable=False)
    ubicacion = Column(String, nullable=True)
    dia_evento = Column(Date, nullable=False, index=True)

    # Turno 1
    cantidad_camareros = Column(Integer, nullable=False, default=0)
    hora_entrada = Column(String(5), nullable=False)
    hora_salida = Column(String(5), nullable=True)

    # Turno 2 (opcional)
    cantidad_camareros_2 = Column(Integer, nullable=False, default=0)
    hora_entrada_2 = Column(String(5), nullable=True)
    hora_salida_2 = Column(String(5), nullable=True)

    catering = Column(Boolean, default=False, nullable=False)
    tiempo_viaje = Column(Integer, nullable=True)  # minutos
    camisa = Column(String(10), nullable=False, default="blanca")
    notas = Column(Text, nullable=True)

    # Referencia sin FK: el coordinador puede eliminarse sin tocar el histórico
    coordinador_id = Column(Integer, nullable=True, index=True)
    webhook_nominas = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    asignaciones = relationship(
        "Asignacion",
        back_populates="pedido",
        order_by="Asignacion.posicion",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Pedido(id={self.id}, cliente={self.cliente}, dia={self.dia_evento})>"


class Asignacion(Base):
    """Vínculo pedido-camarero con su estado de confirmación"""

    __tablename__ = "asignaciones"
    __table_args__ = (
        UniqueConstraint("pedido_id", "camarero_id", name="uq_asignacion_pedido_camarero"),
    )

    id = Column(Integer, primary_key=True, index=True)
    pedido_id = Column(Integer, ForeignKey("pedidos.id", ondelete="CASCADE"), nullable=False, index=True)
    camarero_id = Column(Integer, nullable=False, index=True)

    # Datos desnormalizados para mostrar sin consultar el camarero
    camarero_numero = Column(Integer, nullable=True)
    camarero_nombre = Column(String(255), nullable=False)

    estado = Column(
        Enum(
            EstadoAsignacion,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=20,
        ),
        nullable=False,
        default=EstadoAsignacion.PENDIENTE,
    )
    turno = Column(Integer, nullable=True)
    hora_entrada = Column(String(5), nullable=True)
    hora_salida = Column(String(5), nullable=True)
    posicion = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    pedido = relationship("Pedido", back_populates="asignaciones")

    def __repr__(self):
        return f"<Asignacion(pedido={self.pedido_id}, camarero={self.camarero_id}, estado={self.estado})>"
