"""
Utilidades de horarios para pedidos (turnos en formato HH:MM)
"""
import math
from typing import Optional


def redondear(valor: float) -> int:
    """Redondeo a la mitad hacia arriba (2.5 -> 3), no el redondeo bancario de round()"""
    return math.floor(valor + 0.5)


def _a_minutos(hora: str) -> Optional[int]:
    try:
        horas, minutos = hora.split(":")
        return int(horas) * 60 + int(minutos)
    except (AttributeError, ValueError):
        return None


def calcular_horas(hora_entrada: Optional[str], hora_salida: Optional[str]) -> float:
    """
    Horas entre dos horas HH:MM. Si la salida es anterior a la entrada se
    asume que el turno cruza la medianoche. Entradas inválidas devuelven 0.
    """
    if not hora_entrada or not hora_salida:
        return 0
    entrada = _a_minutos(hora_entrada)
    salida = _a_minutos(hora_salida)
    if entrada is None or salida is None:
        return 0

    total = salida - entrada
    if total < 0:
        total += 24 * 60
    return total / 60


def formatear_horas(horas: float) -> str:
    """8.5 -> '8h 30min', 8 -> '8h'"""
    completas = math.floor(horas)
    minutos = redondear((horas - completas) * 60)
    if minutos == 60:
        completas, minutos = completas + 1, 0
    if minutos == 0:
        return f"{completas}h"
    return f"{completas}h {minutos}min"


def calcular_hora_encuentro(hora_evento: Optional[str], tiempo_viaje: Optional[int]) -> str:
    """Hora de encuentro: hora del evento menos el viaje y 10 minutos de margen"""
    if not hora_evento or not tiempo_viaje:
        return ""
    inicio = _a_minutos(hora_evento)
    if inicio is None:
        return ""

    total = (inicio - (tiempo_viaje + 10)) % (24 * 60)
    return f"{total // 60:02d}:{total % 60:02d}"


def camareros_necesarios(cantidad: Optional[int], cantidad_2: Optional[int] = None) -> int:
    return (cantidad or 0) + (cantidad_2 or 0)


def porcentaje_confirmacion(necesarios: int, confirmados: int) -> int:
    if necesarios == 0:
        return 0
    return redondear(confirmados / necesarios * 100)
