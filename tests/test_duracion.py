"""
Tests de cálculo de duraciones y horarios
"""
from datetime import datetime, timedelta, timezone

import pytest

from gestion_camareros.services.fichajes import (
    Duracion, calcular_duracion, formatear_duracion, normalizar
)
from gestion_camareros.utils.horarios import (
    calcular_hora_encuentro, calcular_horas, camareros_necesarios,
    formatear_horas, porcentaje_confirmacion, redondear
)

ENTRADA = datetime(2024, 3, 15, 18, 0, tzinfo=timezone.utc)


# ============================================================================
# DURACIÓN DE FICHAJES
# ============================================================================

def test_duracion_hora_y_media():
    salida = datetime.fromisoformat("2024-03-15T19:30:00+00:00")
    duracion = calcular_duracion(ENTRADA, salida)
    assert duracion == Duracion(horas=1, minutos=30)
    assert formatear_duracion(duracion) == "1h 30min"


def test_duracion_horas_exactas():
    duracion = calcular_duracion(ENTRADA, ENTRADA + timedelta(hours=2))
    assert formatear_duracion(duracion) == "2h"


@pytest.mark.parametrize("entrada,salida", [
    (None, None),
    (ENTRADA, None),
    (None, ENTRADA),
])
def test_duracion_incompleta(entrada, salida):
    assert calcular_duracion(entrada, salida) is None
    assert formatear_duracion(calcular_duracion(entrada, salida)) == "—"


def test_duracion_redondea_minutos_a_la_mitad_hacia_arriba():
    """89.5 minutos se muestran como 1h 30min"""
    salida = ENTRADA + timedelta(minutes=89, seconds=30)
    assert str(calcular_duracion(ENTRADA, salida)) == "1h 30min"

    salida = ENTRADA + timedelta(minutes=89, seconds=29)
    assert str(calcular_duracion(ENTRADA, salida)) == "1h 29min"


def test_duracion_con_fechas_sin_zona():
    """Las fechas sin zona (SQLite) se tratan como UTC"""
    salida = datetime(2024, 3, 15, 19, 30)
    assert calcular_duracion(ENTRADA, salida).total_minutos == 90
    assert normalizar(salida).tzinfo == timezone.utc


# ============================================================================
# HORARIOS DE PEDIDOS
# ============================================================================

def test_redondear_no_es_bancario():
    assert redondear(2.5) == 3
    assert redondear(0.5) == 1
    assert redondear(1.49) == 1


def test_calcular_horas_cruza_medianoche():
    assert calcular_horas("18:00", "23:30") == 5.5
    assert calcular_horas("22:00", "02:00") == 4
    assert calcular_horas("18:00", None) == 0
    assert calcular_horas("18h", "20:00") == 0


def test_formatear_horas():
    assert formatear_horas(5.5) == "5h 30min"
    assert formatear_horas(8) == "8h"


def test_hora_encuentro():
    assert calcular_hora_encuentro("18:00", 30) == "17:20"
    assert calcular_hora_encuentro("00:15", 20) == "23:45"
    assert calcular_hora_encuentro("18:00", None) == ""


def test_cobertura_del_pedido():
    assert camareros_necesarios(4, 2) == 6
    assert camareros_necesarios(4, None) == 4
    assert porcentaje_confirmacion(3, 1) == 33
    assert porcentaje_confirmacion(3, 2) == 67
    assert porcentaje_confirmacion(0, 0) == 0
