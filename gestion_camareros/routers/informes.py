"""
Router de Informes
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..models import get_db, Pedido
from ..schemas import ApiResponse, PedidoResponse
from ..services import asignaciones
from ..utils import get_current_user, rate_limit
from ..utils.horarios import calcular_hora_encuentro, calcular_horas, formatear_horas

router = APIRouter(dependencies=[Depends(rate_limit), Depends(get_current_user)])


def _pedidos_en_rango(db: Session, desde: Optional[date], hasta: Optional[date]):
    query = db.query(Pedido)
    if desde:
        query = query.filter(Pedido.dia_evento >= desde)
    if hasta:
        query = query.filter(Pedido.dia_evento <= hasta)
    return query.order_by(Pedido.dia_evento, Pedido.id)


@router.get("/informes/cliente", response_model=ApiResponse)
async def informe_cliente(
    cliente: Optional[str] = Query(None),
    desde: Optional[date] = Query(None),
    hasta: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    """Pedidos de un cliente en un rango de fechas"""
    query = _pedidos_en_rango(db, desde, hasta)
    if cliente:
        query = query.filter(Pedido.cliente == cliente)
    return ApiResponse(data=[PedidoResponse.model_validate(p) for p in query.all()])


@router.get("/informes/camarero", response_model=ApiResponse)
async def informe_camarero(
    camarero_id: int = Query(..., gt=0),
    desde: Optional[date] = Query(None),
    hasta: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    """Eventos en los que participa un camarero, con su estado de asignación"""
    eventos = []
    for pedido in _pedidos_en_rango(db, desde, hasta).all():
        asignacion = asignaciones.buscar_asignacion(pedido, camarero_id)
        if not asignacion:
            continue
        hora_entrada = asignacion.hora_entrada or pedido.hora_entrada
        hora_salida = asignacion.hora_salida or pedido.hora_salida
        eventos.append({
            "pedido_id": pedido.id,
            "dia_evento": pedido.dia_evento.isoformat(),
            "cliente": pedido.cliente,
            "lugar": pedido.lugar,
            "hora_entrada": hora_entrada,
            "hora_salida": hora_salida,
            "total_horas": formatear_horas(calcular_horas(hora_entrada, hora_salida)),
            "hora_encuentro": calcular_hora_encuentro(hora_entrada, pedido.tiempo_viaje),
            "estado": asignacion.estado.value,
        })
    return ApiResponse(data=eventos)
