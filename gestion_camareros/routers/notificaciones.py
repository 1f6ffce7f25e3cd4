"""
Router de notificaciones: WhatsApp y tokens de confirmación
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..clients import whatsapp_client
from ..config import settings
from ..exceptions import ValidationError
from ..models import get_db, TokenConfirmacion
from ..schemas import (
    ApiResponse,
    ConfigWhatsAppResponse,
    EnviarWhatsAppRequest, EnviarWhatsAppResponse,
    TokenConfirmacionCreate
)
from ..services import asignaciones, clasificar_config_whatsapp
from ..services.config_whatsapp import EstadoConfigWhatsApp, ResultadoConfigWhatsApp
from ..utils import get_current_user, require_function_secret, rate_limit, write_locks_if_enabled

logger = logging.getLogger(__name__)

router = APIRouter(
    dependencies=[Depends(rate_limit), Depends(get_current_user), Depends(require_function_secret)]
)


def verificar_config_whatsapp() -> ResultadoConfigWhatsApp:
    """Clasifica las credenciales actuales; cualquier fallo cuenta como no configurado"""
    try:
        phone_id = settings.WHATSAPP_PHONE_ID
        api_key = settings.WHATSAPP_API_KEY
        return clasificar_config_whatsapp(phone_id, api_key, configurado=bool(phone_id and api_key))
    except Exception:
        logger.exception("Error al verificar configuración de WhatsApp")
        return ResultadoConfigWhatsApp(
            EstadoConfigWhatsApp.UNCONFIGURED,
            "Error al verificar la configuración"
        )


@router.get("/verificar-whatsapp-config", response_model=ApiResponse[ConfigWhatsAppResponse])
async def get_config_whatsapp():
    """Estado de la configuración de WhatsApp para el panel"""
    resultado = verificar_config_whatsapp()
    return ApiResponse(data=ConfigWhatsAppResponse(
        estado=resultado.estado.value,
        configurado=resultado.configurado,
        detalle=resultado.detalle,
        longitud_token=len(settings.WHATSAPP_API_KEY or ""),
    ))


@router.post("/enviar-whatsapp", response_model=ApiResponse[EnviarWhatsAppResponse])
async def enviar_whatsapp(datos: EnviarWhatsAppRequest, db: Session = Depends(get_db)):
    """
    Enviar mensaje por WhatsApp Business.

    Sin configuración responde success=false para que el panel use el
    envío manual. Con pedido_id y camarero_id la asignación pasa a 'enviado'.
    """
    vincular = datos.pedido_id is not None and datos.camarero_id is not None
    if vincular:
        pedido = asignaciones.obtener_pedido(db, datos.pedido_id)
        asignaciones.obtener_asignacion(pedido, datos.camarero_id)

    if not whatsapp_client.configurado:
        return ApiResponse(success=False, error="WhatsApp Business API no está configurado")

    resultado = await whatsapp_client.enviar_mensaje(datos.telefono, datos.mensaje)
    mensajes = resultado.get("messages") or [{}]

    if vincular:
        asignaciones.marcar_enviado(db, datos.pedido_id, datos.camarero_id, locks=write_locks_if_enabled())

    return ApiResponse(data=EnviarWhatsAppResponse(
        message_id=mensajes[0].get("id"),
        asignacion_actualizada=vincular,
    ))


@router.post("/tokens-confirmacion", response_model=ApiResponse)
async def guardar_token_confirmacion(datos: TokenConfirmacionCreate, db: Session = Depends(get_db)):
    """Registra el token de los enlaces confirmar/no-confirmar enviados al camarero"""
    pedido = asignaciones.obtener_pedido(db, datos.pedido_id)
    asignaciones.obtener_asignacion(pedido, datos.camarero_id)

    db.add(TokenConfirmacion(
        token=datos.token,
        pedido_id=datos.pedido_id,
        camarero_id=datos.camarero_id,
        coordinador_id=datos.coordinador_id or pedido.coordinador_id,
    ))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("El token de confirmación ya existe")
    return ApiResponse()
