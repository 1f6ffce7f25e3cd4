"""
Dependencias de seguridad de la capa de rutas

- Authorization: Bearer obligatorio en rutas de operador (solo se comprueba
  su presencia; las claims se leen sin verificar, para auditoría)
- x-fn-secret obligatorio en métodos mutantes cuando FUNCTION_SECRET está
  configurado
- Límite de peticiones por identificador de cliente
"""
import hmac
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from ..cache import RateLimiter, get_rate_limiter
from ..config import settings
from ..exceptions import Unauthorized, RateLimited

logger = logging.getLogger(__name__)

# HTTP Bearer scheme para el header Authorization (más simple para Swagger)
http_bearer = HTTPBearer(auto_error=False)

METODOS_MUTANTES = {"POST", "PUT", "PATCH", "DELETE"}
SECRET_HEADER = "x-fn-secret"


def read_token_claims(token: str) -> dict:
    """
    Lee las claims de un token sin verificar la firma.
    Tokens que no son JWT se tratan como anónimos.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return {"role": "anon", "sub": None}
    return {
        "role": str(claims.get("role", "anon")),
        "sub": claims.get("sub"),
    }


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(http_bearer)) -> dict:
    """
    Exige un header Authorization: Bearer <token>

    Raises:
        Unauthorized: Si el header falta o no es de tipo Bearer
    """
    if not credentials or not credentials.credentials:
        raise Unauthorized("No autorizado. Header Authorization requerido.")
    return read_token_claims(credentials.credentials)


async def require_function_secret(request: Request) -> None:
    """Valida x-fn-secret en POST/PUT/PATCH/DELETE"""
    if request.method not in METODOS_MUTANTES:
        return

    expected = settings.FUNCTION_SECRET
    if not expected:
        logger.warning("FUNCTION_SECRET no está configurado. Se recomienda configurarlo en producción.")
        return

    provided = request.headers.get(SECRET_HEADER, "")
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning(f"Acceso no autorizado: {request.method} {request.url.path}")
        raise Unauthorized(f"No autorizado. Header {SECRET_HEADER} inválido o ausente.")


def client_identifier(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


async def rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    identifier = client_identifier(request)
    if not limiter.allow(identifier):
        logger.warning(f"Límite de peticiones excedido para {identifier}")
        raise RateLimited("Demasiadas peticiones. Intenta más tarde.")
