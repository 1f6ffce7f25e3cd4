"""
Ciclo de vida de las asignaciones camarero-pedido

    pendiente -> enviado -> confirmado | no confirmado
    (cualquier estado) -> pendiente   (restablecer, solo operador)

Cada operación lee el pedido, modifica en memoria y guarda. Sin control
de concurrencia optimista: la última escritura gana. Si se pasa `locks`
se serializa por (pedido, camarero) sin rechazar a ningún escritor.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import NotFound, TransicionInvalida, ValidationError
from ..models import Asignacion, EstadoAsignacion, Pedido
from ..utils.locks import bloqueo
from . import fichajes

logger = logging.getLogger(__name__)

ESTADOS_RESPUESTA = (EstadoAsignacion.CONFIRMADO, EstadoAsignacion.NO_CONFIRMADO)

_NO_CAMBIA = object()


def obtener_pedido(db: Session, pedido_id: int) -> Pedido:
    pedido = db.query(Pedido).filter(Pedido.id == pedido_id).first()
    if not pedido:
        raise NotFound("Pedido no encontrado")
    return pedido


def buscar_asignacion(pedido: Pedido, camarero_id: int) -> Optional[Asignacion]:
    for asignacion in pedido.asignaciones:
        if asignacion.camarero_id == camarero_id:
            return asignacion
    return None


def obtener_asignacion(pedido: Pedido, camarero_id: int) -> Asignacion:
    asignacion = buscar_asignacion(pedido, camarero_id)
    if not asignacion:
        raise NotFound("El camarero no está asignado a este pedido")
    return asignacion


def _guardar(db: Session, asignacion: Asignacion) -> Asignacion:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("El camarero ya está asignado a este pedido")
    db.refresh(asignacion)
    return asignacion


def crear_asignacion(
    db: Session,
    pedido_id: int,
    camarero_id: int,
    camarero_nombre: str,
    camarero_numero: Optional[int] = None,
    turno: Optional[int] = None,
    hora_entrada: Optional[str] = None,
    hora_salida: Optional[str] = None,
    locks=None,
) -> Asignacion:
    """Añade el camarero al final de la secuencia del pedido, en estado pendiente"""
    with bloqueo(locks, (pedido_id, camarero_id)):
        pedido = obtener_pedido(db, pedido_id)
        if buscar_asignacion(pedido, camarero_id):
            raise ValidationError("El camarero ya está asignado a este pedido")

        posicion = max((a.posicion for a in pedido.asignaciones), default=-1) + 1
        asignacion = Asignacion(
            camarero_id=camarero_id,
            camarero_nombre=camarero_nombre,
            camarero_numero=camarero_numero,
            estado=EstadoAsignacion.PENDIENTE,
            turno=turno,
            hora_entrada=hora_entrada,
            hora_salida=hora_salida,
            posicion=posicion,
        )
        pedido.asignaciones.append(asignacion)
        _guardar(db, asignacion)

    logger.info(f"Camarero {camarero_id} asignado al pedido {pedido_id}")
    return asignacion


def marcar_enviado(db: Session, pedido_id: int, camarero_id: int, locks=None) -> Asignacion:
    """
    pendiente -> enviado. En cualquier otro estado no hace nada
    (reenviar un mensaje no debe deshacer una confirmación).
    """
    with bloqueo(locks, (pedido_id, camarero_id)):
        pedido = obtener_pedido(db, pedido_id)
        asignacion = obtener_asignacion(pedido, camarero_id)

        if asignacion.estado != EstadoAsignacion.PENDIENTE:
            logger.info(
                f"Asignación {pedido_id}/{camarero_id} ya en estado '{asignacion.estado.value}', "
                "no se marca como enviada"
            )
            return asignacion

        asignacion.estado = EstadoAsignacion.ENVIADO
        return _guardar(db, asignacion)


def registrar_respuesta(
    db: Session,
    pedido_id: int,
    camarero_id: int,
    resultado: EstadoAsignacion,
    locks=None,
) -> Asignacion:
    """
    Registra la respuesta del camarero (enlace, webhook o el operador a mano).

    Válida desde enviado y desde pendiente. Repetir la misma respuesta no
    hace nada; cambiar entre confirmado y no confirmado exige restablecer
    antes. Al confirmar se crea el fichaje vacío si no existe.
    """
    resultado = EstadoAsignacion(resultado)
    if resultado not in ESTADOS_RESPUESTA:
        raise ValidationError(f"Respuesta no válida: '{resultado.value}'")

    with bloqueo(locks, (pedido_id, camarero_id)):
        pedido = obtener_pedido(db, pedido_id)
        asignacion = obtener_asignacion(pedido, camarero_id)

        if asignacion.estado == resultado:
            return asignacion
        if asignacion.estado in ESTADOS_RESPUESTA:
            raise TransicionInvalida(
                f"La asignación ya está en estado '{asignacion.estado.value}'; "
                "restablécela a pendiente antes de cambiar la respuesta",
                asignacion.estado.value,
                resultado.value,
            )

        asignacion.estado = resultado
        if resultado == EstadoAsignacion.CONFIRMADO:
            fichajes.asegurar_fichaje(db, pedido_id, camarero_id, asignacion.camarero_nombre)
        _guardar(db, asignacion)

    logger.info(f"Camarero {camarero_id} -> '{resultado.value}' en pedido {pedido_id}")
    return asignacion


def restablecer(
    db: Session,
    pedido_id: int,
    camarero_id: int,
    estado: EstadoAsignacion = EstadoAsignacion.PENDIENTE,
    turno=_NO_CAMBIA,
    hora_entrada=_NO_CAMBIA,
    hora_salida=_NO_CAMBIA,
    locks=None,
) -> Asignacion:
    """Edición del operador: vuelve a pendiente y/o cambia turno y horas propias"""
    if estado != EstadoAsignacion.PENDIENTE:
        raise ValidationError("Solo se puede restablecer una asignación a 'pendiente'")

    with bloqueo(locks, (pedido_id, camarero_id)):
        pedido = obtener_pedido(db, pedido_id)
        asignacion = obtener_asignacion(pedido, camarero_id)

        asignacion.estado = EstadoAsignacion.PENDIENTE
        if turno is not _NO_CAMBIA:
            asignacion.turno = turno
        if hora_entrada is not _NO_CAMBIA:
            asignacion.hora_entrada = hora_entrada
        if hora_salida is not _NO_CAMBIA:
            asignacion.hora_salida = hora_salida
        return _guardar(db, asignacion)


def actualizar_detalles(db: Session, pedido_id: int, camarero_id: int, cambios: dict, locks=None) -> Asignacion:
    """Cambia turno y horas propias sin tocar el estado"""
    with bloqueo(locks, (pedido_id, camarero_id)):
        pedido = obtener_pedido(db, pedido_id)
        asignacion = obtener_asignacion(pedido, camarero_id)
        for campo in ("turno", "hora_entrada", "hora_salida"):
            if campo in cambios:
                setattr(asignacion, campo, cambios[campo])
        return _guardar(db, asignacion)


def eliminar_asignacion(db: Session, pedido_id: int, camarero_id: int, locks=None) -> None:
    """Quita al camarero de la secuencia. El fichaje se conserva."""
    with bloqueo(locks, (pedido_id, camarero_id)):
        pedido = obtener_pedido(db, pedido_id)
        asignacion = obtener_asignacion(pedido, camarero_id)
        pedido.asignaciones.remove(asignacion)
        db.commit()
    logger.info(f"Camarero {camarero_id} retirado del pedido {pedido_id}")


def filtrar_confirmadas(pedido: Pedido) -> List[Asignacion]:
    """Subsecuencia ordenada de asignaciones confirmadas"""
    return [a for a in pedido.asignaciones if a.estado == EstadoAsignacion.CONFIRMADO]


def transicion_permitida(actual: EstadoAsignacion, destino: EstadoAsignacion) -> bool:
    """Mismo estado, vuelta a pendiente, envío desde pendiente o respuesta desde pendiente/enviado"""
    if destino == actual or destino == EstadoAsignacion.PENDIENTE:
        return True
    if destino == EstadoAsignacion.ENVIADO:
        return actual == EstadoAsignacion.PENDIENTE
    return actual in (EstadoAsignacion.PENDIENTE, EstadoAsignacion.ENVIADO)


def reemplazar_asignaciones(db: Session, pedido: Pedido, nuevas: List[dict]) -> None:
    """
    Sustituye la secuencia completa (edición del pedido desde el panel).
    Conserva el orden recibido; no hace commit.

    Los camareros que ya estaban mantienen su estado salvo que llegue uno
    nuevo alcanzable con una transición válida; los nuevos entran con el
    estado indicado o pendiente.

    Raises:
        ValidationError: camarero repetido en la secuencia
        TransicionInvalida: cambio de estado no permitido sobre una asignación existente
    """
    ids = [n["camarero_id"] for n in nuevas]
    if len(ids) != len(set(ids)):
        raise ValidationError("Un camarero no puede estar asignado dos veces al mismo pedido")

    existentes = {a.camarero_id: a for a in pedido.asignaciones}
    for datos in nuevas:
        actual = existentes.get(datos["camarero_id"])
        destino = datos.get("estado")
        if actual is not None and destino is not None and not transicion_permitida(actual.estado, destino):
            raise TransicionInvalida(
                f"El camarero {datos['camarero_id']} está en estado '{actual.estado.value}' y no puede "
                f"pasar a '{destino.value}'; restablécelo a pendiente antes",
                actual.estado.value,
                destino.value,
            )

    secuencia = []
    for posicion, datos in enumerate(nuevas):
        datos = dict(datos)
        estado = datos.pop("estado", None)
        asignacion = existentes.get(datos["camarero_id"]) or Asignacion(camarero_id=datos["camarero_id"])
        for campo, valor in datos.items():
            setattr(asignacion, campo, valor)
        if estado is not None:
            asignacion.estado = EstadoAsignacion(estado)
        elif asignacion.estado is None:
            asignacion.estado = EstadoAsignacion.PENDIENTE
        asignacion.posicion = posicion
        secuencia.append(asignacion)

        if asignacion.estado == EstadoAsignacion.CONFIRMADO and pedido.id is not None:
            fichajes.asegurar_fichaje(db, pedido.id, asignacion.camarero_id, asignacion.camarero_nombre)

    pedido.asignaciones = secuencia
