"""
Punto de entrada de la aplicación FastAPI.
Configura logging, CORS, manejo de errores y monta los routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rehab_rbac import __version__
from rehab_rbac.api.v1.router import api_v1_router
from rehab_rbac.auth.policies import PERMISSIONS, validate_policy_table
from rehab_rbac.config import get_settings
from rehab_rbac.core.exceptions import (
    AuthorizationException,
    authorization_exception_handler,
)

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifecycle ────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Eventos de inicio y cierre de la aplicación."""
    # Startup: una tabla mal definida es un error de configuración fatal
    if settings.POLICY_VALIDATE_ON_STARTUP:
        validate_policy_table()
        logger.info("Tabla de permisos válida: %d recursos", len(PERMISSIONS))
    # Sin clave de verificación todo bearer token sería rechazado
    if not settings.jwt_verification_key:
        key_source = "JWT_SECRET_KEY" if settings.jwt_uses_secret else settings.JWT_PUBLIC_KEY_PATH
        raise RuntimeError(
            f"Clave de verificación JWT no disponible para {settings.JWT_ALGORITHM} ({key_source}). "
            "Genera las claves con: python scripts/generate_keys.py"
        )
    logger.info("%s iniciando en modo %s", settings.APP_NAME, settings.APP_ENV)
    yield
    logger.info("%s cerrando...", settings.APP_NAME)


# ── App ──────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    description="API de permisos por rol del Centro de Rehabilitación",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Exception Handlers ──────────────────────────────
app.add_exception_handler(AuthorizationException, authorization_exception_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Captura excepciones no manejadas para evitar exponer detalles internos."""
    logger.exception("Error no manejado en %s %s", request.method, request.url.path)
    # En producción nunca se exponen detalles, aunque DEBUG quede activo
    if settings.DEBUG and not settings.is_production:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc), "type": type(exc).__name__},
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Error interno del servidor"},
    )


# ── Routers ──────────────────────────────────────────
app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)


# ── Health Check ─────────────────────────────────────
@app.get("/health", tags=["Health"])
async def health_check():
    """Endpoint de health check para monitoreo."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": __version__,
        "environment": settings.APP_ENV,
    }
