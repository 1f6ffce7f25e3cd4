"""
Ciclo de vida del fichaje (entrada/salida) de cada asignación confirmada

    pendiente (sin entrada) -> en curso (entrada) -> completo (entrada y salida)

La edición manual puede sobrescribir cualquier campo, también hacia atrás.
El fichaje automático (QR) solo avanza y nunca marca editado_manualmente.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..exceptions import ValidationError
from ..models import Fichaje
from ..utils.horarios import redondear
from ..utils.locks import bloqueo

logger = logging.getLogger(__name__)

SIN_DURACION = "—"
MAX_LONGITUD_NOTA = 100


class EstadoFichaje(str, enum.Enum):
    PENDIENTE = "pendiente"
    EN_CURSO = "en-curso"
    COMPLETO = "completo"


class AccionFichaje(str, enum.Enum):
    ENTRADA = "entrada"
    SALIDA = "salida"
    YA_COMPLETO = "ya_completo"


@dataclass(frozen=True)
class Duracion:
    horas: int
    minutos: int

    @property
    def total_minutos(self) -> int:
        return self.horas * 60 + self.minutos

    def __str__(self):
        if self.minutos == 0:
            return f"{self.horas}h"
        return f"{self.horas}h {self.minutos}min"


@dataclass(frozen=True)
class ResumenFichaje:
    camarero_id: int
    camarero_nombre: str
    duracion: Duracion


def normalizar(momento: Optional[datetime]) -> Optional[datetime]:
    """Fechas sin zona horaria se interpretan como UTC"""
    if momento is None:
        return None
    if momento.tzinfo is None:
        return momento.replace(tzinfo=timezone.utc)
    return momento.astimezone(timezone.utc)


def calcular_duracion(entrada: Optional[datetime], salida: Optional[datetime]) -> Optional[Duracion]:
    """
    Duración salida - entrada en horas y minutos.

    Los minutos totales se redondean al entero más cercano (mitad hacia
    arriba) antes de repartir en horas. None si falta alguno de los dos.
    """
    if entrada is None or salida is None:
        return None
    diferencia = normalizar(salida) - normalizar(entrada)
    total_minutos = redondear(diferencia.total_seconds() / 60)
    return Duracion(horas=total_minutos // 60, minutos=total_minutos % 60)


def formatear_duracion(duracion: Optional[Duracion]) -> str:
    return str(duracion) if duracion is not None else SIN_DURACION


def horas_trabajadas(fichaje: Fichaje) -> Optional[float]:
    """Horas decimales con dos cifras (formato del webhook de nóminas)"""
    if fichaje.entrada is None or fichaje.salida is None:
        return None
    segundos = (normalizar(fichaje.salida) - normalizar(fichaje.entrada)).total_seconds()
    return redondear(segundos / 3600 * 100) / 100


def estado_fichaje(fichaje: Fichaje) -> EstadoFichaje:
    if fichaje.entrada is None:
        return EstadoFichaje.PENDIENTE
    if fichaje.salida is None:
        return EstadoFichaje.EN_CURSO
    return EstadoFichaje.COMPLETO


def _buscar(db: Session, pedido_id: int, camarero_id: int) -> Optional[Fichaje]:
    return db.query(Fichaje).filter(
        Fichaje.pedido_id == pedido_id,
        Fichaje.camarero_id == camarero_id
    ).first()


def _vacio(pedido_id: int, camarero_id: int, camarero_nombre: Optional[str] = None) -> Fichaje:
    return Fichaje(
        pedido_id=pedido_id,
        camarero_id=camarero_id,
        camarero_nombre=camarero_nombre,
        entrada=None,
        salida=None,
        nota="",
        editado_manualmente=False,
    )


def obtener_fichaje(db: Session, pedido_id: int, camarero_id: int) -> Fichaje:
    """Fichaje guardado o uno pendiente por defecto (no se persiste). Nunca falla."""
    return _buscar(db, pedido_id, camarero_id) or _vacio(pedido_id, camarero_id)


def listar_fichajes(db: Session, pedido_id: int) -> List[Fichaje]:
    return db.query(Fichaje).filter(Fichaje.pedido_id == pedido_id).order_by(Fichaje.id).all()


def asegurar_fichaje(db: Session, pedido_id: int, camarero_id: int, camarero_nombre: Optional[str]) -> Fichaje:
    """Crea el fichaje vacío del par si no existe (sin commit)"""
    fichaje = _buscar(db, pedido_id, camarero_id)
    if fichaje is None:
        fichaje = _vacio(pedido_id, camarero_id, camarero_nombre)
        db.add(fichaje)
        logger.info(f"Fichaje creado para camarero {camarero_id} en pedido {pedido_id}")
    return fichaje


def actualizar_fichaje(
    db: Session,
    pedido_id: int,
    camarero_id: int,
    cambios: dict,
    camarero_nombre: Optional[str] = None,
    locks=None,
) -> Fichaje:
    """
    Edición manual desde el panel.

    Solo se sobrescriben las claves presentes en `cambios` (entrada, salida,
    nota); None en entrada/salida borra el valor. Siempre marca
    editado_manualmente.

    Raises:
        ValidationError: si la salida queda antes que la entrada o la nota
            supera 100 caracteres
    """
    with bloqueo(locks, (pedido_id, camarero_id)):
        fichaje = asegurar_fichaje(db, pedido_id, camarero_id, camarero_nombre)

        entrada = normalizar(cambios["entrada"]) if "entrada" in cambios else normalizar(fichaje.entrada)
        salida = normalizar(cambios["salida"]) if "salida" in cambios else normalizar(fichaje.salida)
        if entrada is not None and salida is not None and salida < entrada:
            db.rollback()
            raise ValidationError("La hora de salida no puede ser anterior a la de entrada")

        nota = cambios.get("nota")
        if nota is not None and len(nota) > MAX_LONGITUD_NOTA:
            db.rollback()
            raise ValidationError(f"La nota no puede superar {MAX_LONGITUD_NOTA} caracteres")

        if "entrada" in cambios:
            fichaje.entrada = entrada
        if "salida" in cambios:
            fichaje.salida = salida
        if nota is not None:
            fichaje.nota = nota
        if camarero_nombre and not fichaje.camarero_nombre:
            fichaje.camarero_nombre = camarero_nombre
        fichaje.editado_manualmente = True
        fichaje.editado_en = datetime.now(timezone.utc)

        db.commit()
        db.refresh(fichaje)

    logger.info(f"Fichaje editado a mano: pedido {pedido_id}, camarero {camarero_id}")
    return fichaje


def fichar_automatico(
    db: Session,
    pedido_id: int,
    camarero_id: int,
    camarero_nombre: Optional[str] = None,
    ahora: Optional[datetime] = None,
    locks=None,
) -> Tuple[AccionFichaje, Fichaje]:
    """
    Escaneo del QR: primera vez entrada, segunda salida, después ya completo.

    Raises:
        ValidationError: si la salida quedaría antes que la entrada registrada
            (p. ej. una entrada futura puesta a mano)
    """
    ahora = normalizar(ahora) or datetime.now(timezone.utc)

    with bloqueo(locks, (pedido_id, camarero_id)):
        fichaje = asegurar_fichaje(db, pedido_id, camarero_id, camarero_nombre)

        if fichaje.entrada is None:
            accion = AccionFichaje.ENTRADA
            fichaje.entrada = ahora
            fichaje.salida = None
        elif fichaje.salida is None:
            if ahora < normalizar(fichaje.entrada):
                db.rollback()
                raise ValidationError("La hora de salida no puede ser anterior a la de entrada")
            accion = AccionFichaje.SALIDA
            fichaje.salida = ahora
        else:
            accion = AccionFichaje.YA_COMPLETO

        if accion != AccionFichaje.YA_COMPLETO:
            fichaje.editado_manualmente = False
            db.commit()
            db.refresh(fichaje)
            logger.info(f"Fichaje {accion.value.upper()}: camarero {camarero_id}, pedido {pedido_id}")

    return accion, fichaje


def resumir(db: Session, pedido_id: int) -> List[ResumenFichaje]:
    """
    Duración por camarero de los fichajes completos del pedido,
    ordenados por nombre del camarero (y su id para empates).
    """
    resumen = []
    for fichaje in listar_fichajes(db, pedido_id):
        duracion = calcular_duracion(fichaje.entrada, fichaje.salida)
        if duracion is None:
            continue
        nombre = fichaje.camarero_nombre or f"Camarero {fichaje.camarero_id}"
        resumen.append(ResumenFichaje(fichaje.camarero_id, nombre, duracion))

    resumen.sort(key=lambda r: (r.camarero_nombre.lower(), r.camarero_id))
    return resumen


def total_equipo(db: Session, pedido_id: int) -> Duracion:
    """Suma de las duraciones positivas de los fichajes completos del pedido"""
    total_minutos = 0.0
    for fichaje in listar_fichajes(db, pedido_id):
        if fichaje.entrada is None or fichaje.salida is None:
            continue
        diferencia = (normalizar(fichaje.salida) - normalizar(fichaje.entrada)).total_seconds() / 60
        if diferencia > 0:
            total_minutos += diferencia
    total = redondear(total_minutos)
    return Duracion(horas=total // 60, minutos=total % 60)
