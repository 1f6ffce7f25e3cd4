"""
Cliente HTTP para WhatsApp Business (Cloud API de Meta)
"""
import re
import logging
from typing import Optional, Dict, Any

import httpx

from ..config import settings
from ..exceptions import UpstreamFailure

logger = logging.getLogger(__name__)


def formatear_telefono(telefono: Optional[str]) -> str:
    """Solo dígitos; a los números españoles de 9 dígitos se les antepone 34"""
    if not telefono:
        return ""
    numero = re.sub(r"\D", "", telefono)
    if len(numero) == 9:
        numero = "34" + numero
    return numero


class WhatsAppClient:
    """Envío de mensajes de texto por WhatsApp Business"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.WHATSAPP_API_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT

    @property
    def configurado(self) -> bool:
        return bool(settings.WHATSAPP_API_KEY and settings.WHATSAPP_PHONE_ID)

    async def enviar_mensaje(self, telefono: str, mensaje: str) -> Dict[str, Any]:
        """
        Enviar un mensaje de texto

        Args:
            telefono: Teléfono del destinatario (se normaliza)
            mensaje: Texto del mensaje

        Returns:
            Respuesta de la API (incluye messages[0].id)

        Raises:
            UpstreamFailure: Si WhatsApp no está configurado, no responde o rechaza el envío
        """
        if not self.configurado:
            raise UpstreamFailure("WhatsApp Business API no está configurado")

        numero = formatear_telefono(telefono)
        url = f"{self.base_url}/{settings.WHATSAPP_PHONE_ID}/messages"
        logger.info(f"Enviando WhatsApp a {numero}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    url,
                    headers={"Authorization": f"Bearer {settings.WHATSAPP_API_KEY}"},
                    json={
                        "messaging_product": "whatsapp",
                        "to": numero,
                        "type": "text",
                        "text": {"body": mensaje},
                    },
                )
        except httpx.TimeoutException:
            logger.error(f"Timeout al enviar WhatsApp a {numero}")
            raise UpstreamFailure("Timeout al contactar con WhatsApp")
        except httpx.RequestError as e:
            logger.error(f"Error de conexión con WhatsApp: {str(e)}")
            raise UpstreamFailure("No se pudo contactar con WhatsApp")

        if response.status_code >= 400:
            try:
                error = response.json().get("error", {})
            except ValueError:
                error = {}
            logger.error(f"Error de WhatsApp API: {response.status_code} - {response.text}")
            raise UpstreamFailure(error.get("message") or "Error al enviar mensaje por WhatsApp")

        return response.json()

    async def notificar(self, telefono: Optional[str], mensaje: str) -> bool:
        """Envío que no interrumpe el flujo: los fallos solo se registran"""
        if not telefono or not self.configurado:
            logger.info("Aviso por WhatsApp omitido (sin teléfono o sin configuración)")
            return False
        try:
            await self.enviar_mensaje(telefono, mensaje)
        except UpstreamFailure as e:
            logger.warning(f"No se pudo enviar el aviso por WhatsApp: {e.mensaje}")
            return False
        return True


# Instancia global del cliente
whatsapp_client = WhatsAppClient()
