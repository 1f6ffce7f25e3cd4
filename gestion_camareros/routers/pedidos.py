"""
Router de Pedidos y sus Asignaciones
"""
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..exceptions import NotFound
from ..models import get_db, Pedido, Camarero, EstadoAsignacion
from ..schemas import (
    ApiResponse,
    PedidoCreate, PedidoUpdate, PedidoResponse,
    AsignacionCreate, AsignacionUpdate, AsignacionResponse, RespuestaAsignacion
)
from ..services import asignaciones
from ..utils import get_current_user, require_function_secret, rate_limit, write_locks_if_enabled

logger = logging.getLogger(__name__)

router = APIRouter(
    dependencies=[Depends(rate_limit), Depends(get_current_user), Depends(require_function_secret)]
)


def _asignaciones_como_dict(datos) -> List[dict]:
    return [a.model_dump() for a in datos]


# ============================================================================
# PEDIDOS
# ============================================================================

@router.get("/pedidos", response_model=ApiResponse[List[PedidoResponse]])
async def list_pedidos(
    desde: Optional[date] = Query(None, description="Eventos desde esta fecha"),
    hasta: Optional[date] = Query(None, description="Eventos hasta esta fecha"),
    cliente: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Listar pedidos por fecha de evento"""
    query = db.query(Pedido)
    if desde:
        query = query.filter(Pedido.dia_evento >= desde)
    if hasta:
        query = query.filter(Pedido.dia_evento <= hasta)
    if cliente:
        query = query.filter(Pedido.cliente == cliente)

    pedidos = query.order_by(Pedido.dia_evento, Pedido.id).all()
    return ApiResponse(data=[PedidoResponse.model_validate(p) for p in pedidos])


@router.get("/pedidos/{pedido_id}", response_model=ApiResponse[PedidoResponse])
async def get_pedido(pedido_id: int, db: Session = Depends(get_db)):
    pedido = asignaciones.obtener_pedido(db, pedido_id)
    return ApiResponse(data=PedidoResponse.model_validate(pedido))


@router.post("/pedidos", response_model=ApiResponse[PedidoResponse])
async def create_pedido(datos: PedidoCreate, db: Session = Depends(get_db)):
    """Crear pedido, opcionalmente con sus asignaciones iniciales"""
    pedido = Pedido(**datos.model_dump(exclude={"asignaciones"}))
    db.add(pedido)
    db.flush()

    asignaciones.reemplazar_asignaciones(db, pedido, _asignaciones_como_dict(datos.asignaciones))
    db.commit()
    db.refresh(pedido)

    logger.info(f"Pedido {pedido.id} creado: {pedido.cliente} ({pedido.dia_evento})")
    return ApiResponse(data=PedidoResponse.model_validate(pedido))


@router.put("/pedidos/{pedido_id}", response_model=ApiResponse[PedidoResponse])
async def update_pedido(pedido_id: int, datos: PedidoUpdate, db: Session = Depends(get_db)):
    """Actualizar pedido. Si se envían asignaciones, sustituyen a las actuales."""
    pedido = asignaciones.obtener_pedido(db, pedido_id)

    cambios = datos.model_dump(exclude_unset=True, exclude={"asignaciones"})
    for campo, valor in cambios.items():
        setattr(pedido, campo, valor)

    if datos.asignaciones is not None:
        asignaciones.reemplazar_asignaciones(db, pedido, _asignaciones_como_dict(datos.asignaciones))
        logger.info(
            f"Pedido {pedido_id}: asignaciones "
            f"{[(a.camarero_numero, a.estado.value) for a in pedido.asignaciones]}"
        )

    db.commit()
    db.refresh(pedido)
    return ApiResponse(data=PedidoResponse.model_validate(pedido))


@router.delete("/pedidos/{pedido_id}", response_model=ApiResponse)
async def delete_pedido(pedido_id: int, db: Session = Depends(get_db)):
    pedido = asignaciones.obtener_pedido(db, pedido_id)
    db.delete(pedido)
    db.commit()
    logger.info(f"Pedido {pedido_id} eliminado")
    return ApiResponse()


# ============================================================================
# ASIGNACIONES
# ============================================================================

@router.get("/pedidos/{pedido_id}/asignaciones", response_model=ApiResponse[List[AsignacionResponse]])
async def list_asignaciones(pedido_id: int, db: Session = Depends(get_db)):
    pedido = asignaciones.obtener_pedido(db, pedido_id)
    return ApiResponse(data=[AsignacionResponse.model_validate(a) for a in pedido.asignaciones])


@router.get("/pedidos/{pedido_id}/asignaciones/confirmadas", response_model=ApiResponse[List[AsignacionResponse]])
async def list_asignaciones_confirmadas(pedido_id: int, db: Session = Depends(get_db)):
    """Camareros confirmados: los únicos que aparecen en el panel de fichajes"""
    pedido = asignaciones.obtener_pedido(db, pedido_id)
    confirmadas = asignaciones.filtrar_confirmadas(pedido)
    return ApiResponse(data=[AsignacionResponse.model_validate(a) for a in confirmadas])


@router.post("/pedidos/{pedido_id}/asignaciones", response_model=ApiResponse[AsignacionResponse])
async def create_asignacion(pedido_id: int, datos: AsignacionCreate, db: Session = Depends(get_db)):
    """Asignar camarero a pedido (estado inicial: pendiente)"""
    camarero = db.query(Camarero).filter(Camarero.id == datos.camarero_id).first()
    if not camarero and not datos.camarero_nombre:
        raise NotFound("Camarero no encontrado")

    asignacion = asignaciones.crear_asignacion(
        db,
        pedido_id,
        datos.camarero_id,
        camarero_nombre=datos.camarero_nombre or camarero.nombre_completo,
        camarero_numero=datos.camarero_numero if datos.camarero_numero is not None else getattr(camarero, "numero", None),
        turno=datos.turno,
        hora_entrada=datos.hora_entrada,
        hora_salida=datos.hora_salida,
        locks=write_locks_if_enabled(),
    )
    return ApiResponse(data=AsignacionResponse.model_validate(asignacion))


@router.post("/pedidos/{pedido_id}/asignaciones/{camarero_id}/enviado", response_model=ApiResponse[AsignacionResponse])
async def marcar_asignacion_enviada(pedido_id: int, camarero_id: int, db: Session = Depends(get_db)):
    """Marcar como enviado (p. ej. tras enviar el mensaje manualmente desde el navegador)"""
    asignacion = asignaciones.marcar_enviado(db, pedido_id, camarero_id, locks=write_locks_if_enabled())
    return ApiResponse(data=AsignacionResponse.model_validate(asignacion))


@router.post("/pedidos/{pedido_id}/asignaciones/{camarero_id}/respuesta", response_model=ApiResponse[AsignacionResponse])
async def registrar_respuesta_asignacion(
    pedido_id: int,
    camarero_id: int,
    datos: RespuestaAsignacion,
    db: Session = Depends(get_db)
):
    """Registrar confirmación o rechazo del camarero"""
    asignacion = asignaciones.registrar_respuesta(
        db, pedido_id, camarero_id, EstadoAsignacion(datos.resultado), locks=write_locks_if_enabled()
    )
    return ApiResponse(data=AsignacionResponse.model_validate(asignacion))


@router.put("/pedidos/{pedido_id}/asignaciones/{camarero_id}", response_model=ApiResponse[AsignacionResponse])
async def update_asignacion(
    pedido_id: int,
    camarero_id: int,
    datos: AsignacionUpdate,
    db: Session = Depends(get_db)
):
    """Editar turno/horas; con estado 'pendiente' además restablece la asignación"""
    cambios = datos.model_dump(exclude_unset=True)
    locks = write_locks_if_enabled()

    if cambios.pop("estado", None):
        asignacion = asignaciones.restablecer(db, pedido_id, camarero_id, locks=locks, **cambios)
    else:
        asignacion = asignaciones.actualizar_detalles(db, pedido_id, camarero_id, cambios, locks=locks)
    return ApiResponse(data=AsignacionResponse.model_validate(asignacion))


@router.delete("/pedidos/{pedido_id}/asignaciones/{camarero_id}", response_model=ApiResponse)
async def delete_asignacion(pedido_id: int, camarero_id: int, db: Session = Depends(get_db)):
    """Retirar camarero del pedido (el fichaje se conserva)"""
    asignaciones.eliminar_asignacion(db, pedido_id, camarero_id, locks=write_locks_if_enabled())
    return ApiResponse()
