"""
Clasificación de la configuración de WhatsApp Business

Función pura: recibe los dos valores configurados y devuelve uno de cuatro
estados con un texto de ayuda para el panel.
"""
import enum
from dataclasses import dataclass
from typing import Optional

PREFIJO_TOKEN = "EAA"
MIN_LONGITUD_TOKEN = 200
MIN_DIGITOS_PHONE_ID = 12
MAX_DIGITOS_PHONE_ID = 20


class EstadoConfigWhatsApp(str, enum.Enum):
    CONFIGURED = "configured"
    UNCONFIGURED = "unconfigured"
    SUSPICIOUS_TOKEN = "suspicious-token"
    DUPLICATE_VALUES = "duplicate-values"


@dataclass(frozen=True)
class ResultadoConfigWhatsApp:
    estado: EstadoConfigWhatsApp
    detalle: str

    @property
    def configurado(self) -> bool:
        return self.estado == EstadoConfigWhatsApp.CONFIGURED


def token_parece_valido(api_key: str) -> bool:
    return len(api_key) > MIN_LONGITUD_TOKEN and api_key.startswith(PREFIJO_TOKEN)


def phone_id_parece_valido(phone_id: str) -> bool:
    return phone_id.isdigit() and MIN_DIGITOS_PHONE_ID <= len(phone_id) <= MAX_DIGITOS_PHONE_ID


def clasificar_config_whatsapp(
    phone_id: Optional[str],
    api_key: Optional[str],
    configurado: bool = True,
) -> ResultadoConfigWhatsApp:
    """
    Args:
        phone_id: WHATSAPP_PHONE_ID configurado
        api_key: WHATSAPP_API_KEY configurado
        configurado: False si ya se sabe que no hay credenciales

    Returns:
        ResultadoConfigWhatsApp con el estado y el detalle
    """
    phone_id = (phone_id or "").strip()
    api_key = (api_key or "").strip()

    if not configurado or not phone_id or not api_key:
        return ResultadoConfigWhatsApp(
            EstadoConfigWhatsApp.UNCONFIGURED,
            "WhatsApp Business API no está configurado. Configura WHATSAPP_API_KEY y "
            "WHATSAPP_PHONE_ID; mientras tanto los mensajes se envían manualmente desde el navegador.",
        )

    if phone_id == api_key:
        return ResultadoConfigWhatsApp(
            EstadoConfigWhatsApp.DUPLICATE_VALUES,
            "WHATSAPP_API_KEY y WHATSAPP_PHONE_ID tienen el mismo valor. Son dos credenciales "
            "diferentes: el Phone ID es un número de unos 15 dígitos y el API Key un token "
            f"largo ({MIN_LONGITUD_TOKEN}+ caracteres) que empieza por \"{PREFIJO_TOKEN}\".",
        )

    if not token_parece_valido(api_key):
        detalle = (
            f"El WHATSAPP_API_KEY tiene {len(api_key)} caracteres; un token válido supera "
            f"{MIN_LONGITUD_TOKEN} y empieza por \"{PREFIJO_TOKEN}\"."
        )
        if token_parece_valido(phone_id):
            detalle += " Parece que los valores de API Key y Phone ID están intercambiados."
        return ResultadoConfigWhatsApp(EstadoConfigWhatsApp.SUSPICIOUS_TOKEN, detalle)

    if not phone_id_parece_valido(phone_id):
        return ResultadoConfigWhatsApp(
            EstadoConfigWhatsApp.SUSPICIOUS_TOKEN,
            f"El WHATSAPP_PHONE_ID debería ser un número de unos 15 dígitos "
            f"(tiene {len(phone_id)} caracteres).",
        )

    return ResultadoConfigWhatsApp(
        EstadoConfigWhatsApp.CONFIGURED,
        "WhatsApp Business API configurado correctamente. Envío automático activado.",
    )
