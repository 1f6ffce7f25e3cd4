"""
Gestión de Camareros - Servicio API
FastAPI Application
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .exceptions import GestionCamarerosError, UpstreamFailure
from .logging_config import setup_logging
from .models import Base, SessionLocal, engine
from .schemas import HealthResponse

logger = logging.getLogger(__name__)

# Crear aplicación FastAPI
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    Servicio de gestión de camareros para eventos y catering.

    ## Funcionalidades

    * **Pedidos**: Eventos con uno o dos turnos y su plantilla de camareros
    * **Asignaciones**: Ciclo pendiente → enviado → confirmado / no confirmado
    * **Fichajes**: Entrada y salida por QR o edición manual del coordinador
    * **Notificaciones**: WhatsApp Business y enlaces de confirmación
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _envelope(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "data": None, "error": error})


@app.exception_handler(GestionCamarerosError)
async def gestion_camareros_error_handler(request: Request, exc: GestionCamarerosError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.mensaje}")
    return _envelope(exc.status_code, exc.mensaje)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    detalle = "; ".join(
        f"{'.'.join(str(parte) for parte in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return _envelope(status.HTTP_422_UNPROCESSABLE_ENTITY, detalle)


@app.exception_handler(OperationalError)
async def database_error_handler(request: Request, exc: OperationalError):
    logger.error(f"Base de datos inaccesible en {request.method} {request.url.path}: {exc}")
    return _envelope(UpstreamFailure.status_code, "Base de datos no disponible")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Error no controlado en {request.method} {request.url.path}")
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor")


# Importar y configurar routers después de crear la app para evitar imports circulares
from .routers import (  # noqa: E402
    referencias_router,
    pedidos_router,
    fichajes_router,
    notificaciones_router,
    informes_router,
    enlaces_router
)

# Incluir routers
app.include_router(referencias_router, prefix=settings.API_PREFIX, tags=["referencias"])
app.include_router(pedidos_router, prefix=settings.API_PREFIX, tags=["pedidos"])
app.include_router(fichajes_router, prefix=settings.API_PREFIX, tags=["fichajes"])
app.include_router(notificaciones_router, prefix=settings.API_PREFIX, tags=["notificaciones"])
app.include_router(informes_router, prefix=settings.API_PREFIX, tags=["informes"])

# ENLACES PÚBLICOS (sin cabeceras de autenticación)
app.include_router(enlaces_router, prefix=settings.API_PREFIX, tags=["enlaces"])


@app.get("/", include_in_schema=False)
async def root():
    """Redireccionar a la documentación"""
    return RedirectResponse(url="/docs")


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def root_health():
    """Health check raíz"""
    database = "connected"
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Health check: base de datos inaccesible: {e}")
        database = "disconnected"
    finally:
        db.close()

    return HealthResponse(
        status="healthy" if database == "connected" else "unhealthy",
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        database=database
    )


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Evento de inicio de la aplicación"""
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info(f"[STARTUP] {settings.APP_NAME} v{settings.APP_VERSION} iniciado")
    logger.info(f"Documentación disponible en: http://{settings.SERVICE_HOST}:{settings.SERVICE_PORT}/docs")
    logger.info(f"Endpoints en: {settings.API_PREFIX}")
    if not settings.FUNCTION_SECRET:
        logger.warning("FUNCTION_SECRET no configurado: las peticiones mutantes no se validan")


@app.on_event("shutdown")
async def shutdown_event():
    """Evento de cierre de la aplicación"""
    logger.info(f"[SHUTDOWN] {settings.APP_NAME} detenido")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gestion_camareros.main:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        reload=settings.DEBUG
    )
