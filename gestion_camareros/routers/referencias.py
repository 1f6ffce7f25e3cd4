"""
Router de entidades de referencia: Camareros, Coordinadores, Clientes
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..exceptions import NotFound
from ..models import get_db, Camarero, Coordinador, Cliente
from ..schemas import (
    ApiResponse,
    CamareroCreate, CamareroUpdate, CamareroResponse,
    CoordinadorCreate, CoordinadorUpdate, CoordinadorResponse,
    ClienteCreate, ClienteUpdate, ClienteResponse
)
from ..utils import get_current_user, require_function_secret, rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(
    dependencies=[Depends(rate_limit), Depends(get_current_user), Depends(require_function_secret)]
)


def _siguiente_numero(db: Session, modelo) -> int:
    return (db.query(func.max(modelo.numero)).scalar() or 0) + 1


def _obtener(db: Session, modelo, entidad_id: int, mensaje: str):
    entidad = db.query(modelo).filter(modelo.id == entidad_id).first()
    if not entidad:
        raise NotFound(mensaje)
    return entidad


# ============================================================================
# CAMAREROS
# ============================================================================

@router.get("/camareros", response_model=ApiResponse[List[CamareroResponse]])
async def list_camareros(
    activo: Optional[bool] = Query(None),
    db: Session = Depends(get_db)
):
    """Listar camareros ordenados por número"""
    query = db.query(Camarero)
    if activo is not None:
        query = query.filter(Camarero.activo == activo)
    camareros = query.order_by(Camarero.numero).all()
    return ApiResponse(data=[CamareroResponse.model_validate(c) for c in camareros])


@router.get("/camareros/{camarero_id}", response_model=ApiResponse[CamareroResponse])
async def get_camarero(camarero_id: int, db: Session = Depends(get_db)):
    camarero = _obtener(db, Camarero, camarero_id, "Camarero no encontrado")
    return ApiResponse(data=CamareroResponse.model_validate(camarero))


@router.post("/camareros", response_model=ApiResponse[CamareroResponse])
async def create_camarero(datos: CamareroCreate, db: Session = Depends(get_db)):
    """Crear camarero con el siguiente número correlativo"""
    camarero = Camarero(**datos.model_dump(), numero=_siguiente_numero(db, Camarero))
    db.add(camarero)
    db.commit()
    db.refresh(camarero)
    logger.info(f"Camarero #{camarero.numero} creado: {camarero.nombre_completo}")
    return ApiResponse(data=CamareroResponse.model_validate(camarero))


@router.put("/camareros/{camarero_id}", response_model=ApiResponse[CamareroResponse])
async def update_camarero(camarero_id: int, datos: CamareroUpdate, db: Session = Depends(get_db)):
    camarero = _obtener(db, Camarero, camarero_id, "Camarero no encontrado")
    for campo, valor in datos.model_dump(exclude_unset=True).items():
        setattr(camarero, campo, valor)
    db.commit()
    db.refresh(camarero)
    return ApiResponse(data=CamareroResponse.model_validate(camarero))


@router.delete("/camareros/{camarero_id}", response_model=ApiResponse)
async def delete_camarero(camarero_id: int, db: Session = Depends(get_db)):
    """Eliminar camarero. Sus asignaciones conservan el nombre desnormalizado."""
    camarero = _obtener(db, Camarero, camarero_id, "Camarero no encontrado")
    db.delete(camarero)
    db.commit()
    return ApiResponse()


# ============================================================================
# COORDINADORES
# ============================================================================

@router.get("/coordinadores", response_model=ApiResponse[List[CoordinadorResponse]])
async def list_coordinadores(db: Session = Depends(get_db)):
    coordinadores = db.query(Coordinador).order_by(Coordinador.numero).all()
    return ApiResponse(data=[CoordinadorResponse.model_validate(c) for c in coordinadores])


@router.get("/coordinadores/{coordinador_id}", response_model=ApiResponse[CoordinadorResponse])
async def get_coordinador(coordinador_id: int, db: Session = Depends(get_db)):
    coordinador = _obtener(db, Coordinador, coordinador_id, "Coordinador no encontrado")
    return ApiResponse(data=CoordinadorResponse.model_validate(coordinador))


@router.post("/coordinadores", response_model=ApiResponse[CoordinadorResponse])
async def create_coordinador(datos: CoordinadorCreate, db: Session = Depends(get_db)):
    coordinador = Coordinador(**datos.model_dump(), numero=_siguiente_numero(db, Coordinador))
    db.add(coordinador)
    db.commit()
    db.refresh(coordinador)
    return ApiResponse(data=CoordinadorResponse.model_validate(coordinador))


@router.put("/coordinadores/{coordinador_id}", response_model=ApiResponse[CoordinadorResponse])
async def update_coordinador(coordinador_id: int, datos: CoordinadorUpdate, db: Session = Depends(get_db)):
    coordinador = _obtener(db, Coordinador, coordinador_id, "Coordinador no encontrado")
    for campo, valor in datos.model_dump(exclude_unset=True).items():
        setattr(coordinador, campo, valor)
    db.commit()
    db.refresh(coordinador)
    return ApiResponse(data=CoordinadorResponse.model_validate(coordinador))


@router.delete("/coordinadores/{coordinador_id}", response_model=ApiResponse)
async def delete_coordinador(coordinador_id: int, db: Session = Depends(get_db)):
    coordinador = _obtener(db, Coordinador, coordinador_id, "Coordinador no encontrado")
    db.delete(coordinador)
    db.commit()
    return ApiResponse()


# ============================================================================
# CLIENTES
# ============================================================================

@router.get("/clientes", response_model=ApiResponse[List[ClienteResponse]])
async def list_clientes(db: Session = Depends(get_db)):
    clientes = db.query(Cliente).order_by(Cliente.nombre).all()
    return ApiResponse(data=[ClienteResponse.model_validate(c) for c in clientes])


@router.get("/clientes/{cliente_id}", response_model=ApiResponse[ClienteResponse])
async def get_cliente(cliente_id: int, db: Session = Depends(get_db)):
    cliente = _obtener(db, Cliente, cliente_id, "Cliente no encontrado")
    return ApiResponse(data=ClienteResponse.model_validate(cliente))


@router.post("/clientes", response_model=ApiResponse[ClienteResponse])
async def create_cliente(datos: ClienteCreate, db: Session = Depends(get_db)):
    cliente = Cliente(**datos.model_dump())
    db.add(cliente)
    db.commit()
    db.refresh(cliente)
    return ApiResponse(data=ClienteResponse.model_validate(cliente))


@router.put("/clientes/{cliente_id}", response_model=ApiResponse[ClienteResponse])
async def update_cliente(cliente_id: int, datos: ClienteUpdate, db: Session = Depends(get_db)):
    cliente = _obtener(db, Cliente, cliente_id, "Cliente no encontrado")
    for campo, valor in datos.model_dump(exclude_unset=True).items():
        setattr(cliente, campo, valor)
    db.commit()
    db.refresh(cliente)
    return ApiResponse(data=ClienteResponse.model_validate(cliente))


@router.delete("/clientes/{cliente_id}", response_model=ApiResponse)
async def delete_cliente(cliente_id: int, db: Session = Depends(get_db)):
    cliente = _obtener(db, Cliente, cliente_id, "Cliente no encontrado")
    db.delete(cliente)
    db.commit()
    return ApiResponse()
