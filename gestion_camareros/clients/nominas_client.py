"""
Cliente del webhook de nóminas: avisa cuando un fichaje se completa
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

import httpx

from ..config import settings
from ..models import Fichaje, Pedido
from ..services.fichajes import horas_trabajadas

logger = logging.getLogger(__name__)


def construir_payload(pedido: Pedido, fichaje: Fichaje, telefono: Optional[str] = None) -> Dict[str, Any]:
    return {
        "evento": "fichaje_completado",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "pedido": {
            "id": pedido.id,
            "cliente": pedido.cliente,
            "lugar": pedido.lugar,
            "fecha": pedido.dia_evento.isoformat() if pedido.dia_evento else None,
        },
        "camarero": {
            "id": fichaje.camarero_id,
            "nombre": fichaje.camarero_nombre,
            "telefono": telefono,
        },
        "fichaje": {
            "entrada": fichaje.entrada.isoformat() if fichaje.entrada else None,
            "salida": fichaje.salida.isoformat() if fichaje.salida else None,
            "horas_trabajadas": horas_trabajadas(fichaje),
            "editado_manualmente": bool(fichaje.editado_manualmente),
            "nota": fichaje.nota or "",
        },
    }


class NominasClient:

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout or settings.HTTP_TIMEOUT

    async def fichaje_completado(self, pedido: Pedido, fichaje: Fichaje, telefono: Optional[str] = None) -> bool:
        """
        POST al webhook del pedido o, si no tiene, al global.
        Nunca lanza: devuelve False si no hay webhook o si falla.
        """
        url = pedido.webhook_nominas or settings.WEBHOOK_NOMINAS_URL
        if not url or fichaje.salida is None:
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=construir_payload(pedido, fichaje, telefono))
        except httpx.HTTPError as e:
            logger.error(f"Webhook de nóminas falló (no bloqueante): {str(e)}")
            return False

        logger.info(f"Webhook nóminas -> {url} -> HTTP {response.status_code}")
        return response.is_success


nominas_client = NominasClient()
