"""
Movies API – Logging configuration
===================================
Un único handler a stdout colgado del logger `movies_api`, compartido
por la API (lifespan) y la CLI de migraciones.

NIVELES:
    setup_logging() acepta el nivel como int o como el string de
    LOG_LEVEL ("debug", "INFO", ...). Un nombre desconocido cae a INFO
    con un warning. `movies-migrate -v` reconfigura a DEBUG para ver
    el SQL que ejecuta el adapter.
"""

from __future__ import annotations

import logging
import sys
from typing import Union

ROOT_LOGGER = "movies_api"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Librerías del stack que hablan demasiado en INFO
QUIET_LOGGERS = ("aiomysql", "sqlalchemy.engine", "uvicorn.access")

_HANDLER_NAME = "movies_api.stdout"


def resolve_level(level: Union[int, str]) -> int:
    """Nivel numérico desde un int o un nombre como 'debug'."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if isinstance(resolved, int):
        return resolved
    logging.getLogger(ROOT_LOGGER).warning("LOG_LEVEL desconocido %r, usando INFO", level)
    return logging.INFO


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Configura el logger de la aplicación.

    Se puede llamar varias veces (import de main, lifespan, CLI): el
    handler se instala una sola vez y solo cambia el nivel.
    """
    app_logger = logging.getLogger(ROOT_LOGGER)
    if not any(h.get_name() == _HANDLER_NAME for h in app_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        app_logger.addHandler(handler)

    app_logger.setLevel(resolve_level(level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Logger hijo de `movies_api` (`get_logger("db.manager")` → movies_api.db.manager)."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
