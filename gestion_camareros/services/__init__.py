"""
Lógica de negocio: asignaciones, fichajes y configuración de WhatsApp
"""
from . import asignaciones, fichajes
from .config_whatsapp import (
    EstadoConfigWhatsApp,
    ResultadoConfigWhatsApp,
    clasificar_config_whatsapp,
)

__all__ = [
    "asignaciones",
    "fichajes",
    "EstadoConfigWhatsApp",
    "ResultadoConfigWhatsApp",
    "clasificar_config_whatsapp",
]
