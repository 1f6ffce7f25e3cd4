"""
Router de enlaces públicos que abre el camarero desde el móvil

No exigen Authorization ni x-fn-secret: el token del enlace es la credencial.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..clients import whatsapp_client, nominas_client
from ..exceptions import NotFound
from ..models import get_db, Camarero, Coordinador, EstadoAsignacion, Pedido, TokenConfirmacion, TokenQR
from ..schemas import ApiResponse, FichajeResponse, FicharResponse, RespuestaEnlaceResponse
from ..services import asignaciones, fichajes
from ..services.fichajes import AccionFichaje
from ..utils import rate_limit, write_locks_if_enabled
from .fichajes import obtener_o_crear_token_qr, url_fichaje

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(rate_limit)])


def _telefono_coordinador(db: Session, coordinador_id: Optional[int]) -> Optional[str]:
    if not coordinador_id:
        return None
    coordinador = db.query(Coordinador).filter(Coordinador.id == coordinador_id).first()
    return coordinador.telefono if coordinador else None


def _datos_evento(pedido: Pedido) -> str:
    return (
        f"Evento: {pedido.cliente}\n"
        f"Fecha: {pedido.dia_evento.strftime('%d/%m/%Y')}\n"
        f"Lugar: {pedido.lugar}\n"
        f"Hora: {pedido.hora_entrada}"
    )


async def _responder(db: Session, token: str, resultado: EstadoAsignacion) -> RespuestaEnlaceResponse:
    confirmacion = db.query(TokenConfirmacion).filter(
        TokenConfirmacion.token == token,
        TokenConfirmacion.usado == False  # noqa: E712
    ).first()
    if not confirmacion:
        raise NotFound("El enlace de confirmación no es válido o ya ha sido utilizado.")

    pedido_id, camarero_id = confirmacion.pedido_id, confirmacion.camarero_id
    asignacion = asignaciones.registrar_respuesta(
        db, pedido_id, camarero_id, resultado, locks=write_locks_if_enabled()
    )
    confirmacion.usado = True
    db.commit()
    logger.info(f"Enlace de confirmación usado: pedido {pedido_id}, camarero {camarero_id} -> '{resultado.value}'")

    pedido = asignaciones.obtener_pedido(db, pedido_id)
    todos_confirmados = bool(pedido.asignaciones) and all(
        a.estado == EstadoAsignacion.CONFIRMADO for a in pedido.asignaciones
    )

    nombre = asignacion.camarero_nombre
    if resultado == EstadoAsignacion.CONFIRMADO:
        token_qr = obtener_o_crear_token_qr(db, pedido_id, camarero_id)
        mensaje = (
            f"✅ CONFIRMACIÓN RECIBIDA\n\n{nombre} ha confirmado su asistencia.\n\n{_datos_evento(pedido)}"
            f"\n\n📲 LINK DE FICHAJE ({nombre}):\n{url_fichaje(token_qr.token)}"
        )
        if todos_confirmados:
            mensaje += "\n\n🎉 ¡TODOS LOS CAMAREROS HAN CONFIRMADO!"
    else:
        mensaje = (
            f"❌ RECHAZO DE SERVICIO\n\n{nombre} ha indicado que NO puede asistir.\n\n{_datos_evento(pedido)}"
            "\n\n💡 ACCIÓN REQUERIDA: Asignar un camarero de reemplazo."
        )

    coordinador_id = confirmacion.coordinador_id or pedido.coordinador_id
    await whatsapp_client.notificar(_telefono_coordinador(db, coordinador_id), mensaje)

    return RespuestaEnlaceResponse(
        pedido_id=pedido_id,
        camarero_id=camarero_id,
        estado=asignacion.estado.value,
        cliente=pedido.cliente,
        lugar=pedido.lugar,
        dia_evento=pedido.dia_evento.isoformat(),
        hora_entrada=pedido.hora_entrada,
        todos_confirmados=todos_confirmados,
    )


@router.get("/confirmar/{token}", response_model=ApiResponse[RespuestaEnlaceResponse])
async def confirmar_asistencia(token: str, db: Session = Depends(get_db)):
    """El camarero confirma su asistencia"""
    return ApiResponse(data=await _responder(db, token, EstadoAsignacion.CONFIRMADO))


@router.get("/no-confirmar/{token}", response_model=ApiResponse[RespuestaEnlaceResponse])
async def rechazar_asistencia(token: str, db: Session = Depends(get_db)):
    """El camarero indica que no puede asistir"""
    return ApiResponse(data=await _responder(db, token, EstadoAsignacion.NO_CONFIRMADO))


@router.get("/fichar/{token}", response_model=ApiResponse[FicharResponse])
async def fichar(token: str, db: Session = Depends(get_db)):
    """Escaneo del QR: registra entrada, luego salida"""
    token_qr = db.query(TokenQR).filter(TokenQR.token == token).first()
    if not token_qr:
        logger.warning(f"Escaneo de QR con token desconocido: {token}")
        raise NotFound("QR no válido o expirado")

    pedido = asignaciones.obtener_pedido(db, token_qr.pedido_id)
    asignacion = asignaciones.buscar_asignacion(pedido, token_qr.camarero_id)
    camarero = db.query(Camarero).filter(Camarero.id == token_qr.camarero_id).first()
    nombre = asignacion.camarero_nombre if asignacion else getattr(camarero, "nombre_completo", None)

    accion, fichaje = fichajes.fichar_automatico(
        db, pedido.id, token_qr.camarero_id, camarero_nombre=nombre, locks=write_locks_if_enabled()
    )

    if accion == AccionFichaje.SALIDA:
        await nominas_client.fichaje_completado(pedido, fichaje, getattr(camarero, "telefono", None))

    if accion != AccionFichaje.YA_COMPLETO:
        emoji, texto = ("🟢", "ENTRADA") if accion == AccionFichaje.ENTRADA else ("🔴", "SALIDA")
        momento = fichaje.entrada if accion == AccionFichaje.ENTRADA else fichaje.salida
        await whatsapp_client.notificar(
            _telefono_coordinador(db, pedido.coordinador_id),
            f"{emoji} FICHAJE {texto}\n\n{nombre}\nEvento: {pedido.cliente}\n"
            f"Lugar: {pedido.lugar}\nHora: {momento.strftime('%H:%M')}"
        )

    return ApiResponse(data=FicharResponse(accion=accion.value, fichaje=FichajeResponse.model_validate(fichaje)))
