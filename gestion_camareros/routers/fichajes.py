"""
Router de Fichajes (entrada/salida) y enlaces QR de autofichaje
"""
import logging
import secrets
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..clients import nominas_client
from ..config import settings
from ..exceptions import NotFound
from ..models import get_db, Camarero, TokenQR
from ..schemas import (
    ApiResponse,
    FichajeUpdate, FichajeResponse, ResumenFichajeResponse, ResumenPedidoResponse, DuracionResponse,
    QRTokenCreate, QRTokenResponse
)
from ..services import asignaciones, fichajes
from ..utils import get_current_user, require_function_secret, rate_limit, write_locks_if_enabled

logger = logging.getLogger(__name__)

router = APIRouter(
    dependencies=[Depends(rate_limit), Depends(get_current_user), Depends(require_function_secret)]
)

ALFABETO_QR = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz23456789"
LONGITUD_QR = 14


def generar_token_qr() -> str:
    return "".join(secrets.choice(ALFABETO_QR) for _ in range(LONGITUD_QR))


def url_fichaje(token: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}{settings.API_PREFIX}/fichar/{token}"


def obtener_o_crear_token_qr(db: Session, pedido_id: int, camarero_id: int) -> TokenQR:
    """Reutiliza el token del par si ya existe"""
    existente = db.query(TokenQR).filter(
        TokenQR.pedido_id == pedido_id,
        TokenQR.camarero_id == camarero_id
    ).first()
    if existente:
        return existente

    token_qr = TokenQR(token=generar_token_qr(), pedido_id=pedido_id, camarero_id=camarero_id)
    db.add(token_qr)
    db.commit()
    db.refresh(token_qr)
    logger.info(f"Token QR creado para camarero {camarero_id} en pedido {pedido_id}")
    return token_qr


# ============================================================================
# FICHAJES
# ============================================================================

@router.get("/fichajes/{pedido_id}", response_model=ApiResponse[List[FichajeResponse]])
async def list_fichajes(pedido_id: int, db: Session = Depends(get_db)):
    """Fichajes registrados de un pedido"""
    registros = fichajes.listar_fichajes(db, pedido_id)
    return ApiResponse(data=[FichajeResponse.model_validate(f) for f in registros])


@router.get("/fichajes/{pedido_id}/resumen", response_model=ApiResponse[ResumenPedidoResponse])
async def resumen_fichajes(pedido_id: int, db: Session = Depends(get_db)):
    """Horas trabajadas por camarero (solo fichajes completos) y total del equipo"""
    camareros = [
        ResumenFichajeResponse(
            camarero_id=r.camarero_id,
            camarero_nombre=r.camarero_nombre,
            horas=r.duracion.horas,
            minutos=r.duracion.minutos,
            duracion=str(r.duracion),
        )
        for r in fichajes.resumir(db, pedido_id)
    ]
    total = fichajes.total_equipo(db, pedido_id)
    return ApiResponse(data=ResumenPedidoResponse(
        camareros=camareros,
        total=DuracionResponse(horas=total.horas, minutos=total.minutos, duracion=str(total)),
    ))


@router.get("/fichajes/{pedido_id}/{camarero_id}", response_model=ApiResponse[FichajeResponse])
async def get_fichaje(pedido_id: int, camarero_id: int, db: Session = Depends(get_db)):
    """Fichaje del camarero; si no existe se devuelve uno pendiente"""
    fichaje = fichajes.obtener_fichaje(db, pedido_id, camarero_id)
    return ApiResponse(data=FichajeResponse.model_validate(fichaje))


@router.put("/fichajes/{pedido_id}/{camarero_id}", response_model=ApiResponse[FichajeResponse])
async def update_fichaje(
    pedido_id: int,
    camarero_id: int,
    datos: FichajeUpdate,
    db: Session = Depends(get_db)
):
    """Edición manual del coordinador (marca el fichaje como editado)"""
    pedido = asignaciones.obtener_pedido(db, pedido_id)
    asignacion = asignaciones.obtener_asignacion(pedido, camarero_id)
    salida_anterior = fichajes.normalizar(fichajes.obtener_fichaje(db, pedido_id, camarero_id).salida)

    fichaje = fichajes.actualizar_fichaje(
        db,
        pedido_id,
        camarero_id,
        datos.model_dump(exclude_unset=True),
        camarero_nombre=asignacion.camarero_nombre,
        locks=write_locks_if_enabled(),
    )

    # El webhook solo se dispara cuando cambia la salida, no al editar la nota
    if fichaje.salida is not None and fichajes.normalizar(fichaje.salida) != salida_anterior:
        camarero = db.query(Camarero).filter(Camarero.id == camarero_id).first()
        await nominas_client.fichaje_completado(pedido, fichaje, getattr(camarero, "telefono", None))

    return ApiResponse(data=FichajeResponse.model_validate(fichaje))


# ============================================================================
# TOKENS QR
# ============================================================================

@router.post("/qr-tokens", response_model=ApiResponse[QRTokenResponse])
async def create_qr_token(datos: QRTokenCreate, db: Session = Depends(get_db)):
    """Genera (o reutiliza) el enlace de autofichaje de un camarero"""
    pedido = asignaciones.obtener_pedido(db, datos.pedido_id)
    asignaciones.obtener_asignacion(pedido, datos.camarero_id)

    token_qr = obtener_o_crear_token_qr(db, datos.pedido_id, datos.camarero_id)
    return ApiResponse(data=QRTokenResponse(token=token_qr.token, qr_url=url_fichaje(token_qr.token)))


@router.get("/qr-tokens/{pedido_id}/{camarero_id}", response_model=ApiResponse[QRTokenResponse])
async def get_qr_token(pedido_id: int, camarero_id: int, db: Session = Depends(get_db)):
    token_qr = db.query(TokenQR).filter(
        TokenQR.pedido_id == pedido_id,
        TokenQR.camarero_id == camarero_id
    ).first()
    if not token_qr:
        raise NotFound("No existe QR para este camarero y pedido")
    return ApiResponse(data=QRTokenResponse(token=token_qr.token, qr_url=url_fichaje(token_qr.token)))
