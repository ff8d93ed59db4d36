"""
Movies API – Main Application Entry Point
==========================================
ARRANQUE:
  1. Configurar logging
  2. FastAPI startup (lifespan):
     a. Cargar .env en el entorno del proceso
     b. Construir Settings e inicializar el contenedor
        (la conexión a MySQL NO se abre aquí: se crea en la primera query)
  3. FastAPI shutdown:
     a. Cerrar la conexión si llegó a abrirse

  uvicorn movies_api.main:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import pymysql
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from movies_api import __version__
from movies_api.container import get_container, init_container
from movies_api.domain.exceptions import ConfigurationError, MovieNotFoundError, MoviesApiError
from movies_api.presentation.api.routes import router
from movies_api.shared.config.env import load_env, missing_keys
from movies_api.shared.config.settings import get_settings
from movies_api.shared.logging.logger import get_logger, setup_logging

# ─── Logging ────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("main")


# ─── FastAPI Lifespan ───────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle de la aplicación."""
    load_env()
    settings = get_settings()
    setup_logging(settings.log_level)
    container = init_container(settings)

    logger.info("=" * 60)
    logger.info("  Movies API v%s", __version__)
    logger.info("  Entorno: %s", settings.app_env)
    logger.info("  Database: %s@%s:%s/%s (conexión perezosa)",
                settings.database_user, settings.database_host,
                settings.database_port or 3306, settings.database_name)
    missing = missing_keys()
    if missing:
        logger.warning("  Variables sin valor: %s", ", ".join(missing))
    logger.info("=" * 60)

    yield  # ← La app está corriendo aquí

    # ── SHUTDOWN ──
    logger.info("Iniciando shutdown...")
    await container.close()
    logger.info("✓ Shutdown completo")


# ─── Error handlers ─────────────────────────────────────────────────────

async def movies_api_error_handler(request: Request, exc: MoviesApiError) -> JSONResponse:
    if isinstance(exc, MovieNotFoundError):
        status_code = 404
    elif isinstance(exc, ConfigurationError):
        status_code = 500
    else:
        status_code = 400
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def database_error_handler(request: Request, exc: pymysql.err.Error) -> JSONResponse:
    logger.error("Error de base de datos en %s: %s", request.url.path, exc)
    content = {"error": "DATABASE_ERROR", "message": "Error de base de datos"}
    if get_container().settings.app_debug:
        content["detail"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ─── FastAPI App ────────────────────────────────────────────────────────

def create_app() -> FastAPI:
    app = FastAPI(
        title="Movies API",
        description="API de películas sobre MySQL con migraciones versionadas",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_exception_handler(MoviesApiError, movies_api_error_handler)
    app.add_exception_handler(pymysql.err.Error, database_error_handler)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Entry point `movies-api`."""
    import uvicorn

    load_env()
    settings = get_settings()
    uvicorn.run("movies_api.main:app", host=settings.api_host, port=settings.api_port)
