"""
Movies API – Environment loader
================================
Vuelca un archivo .env (líneas KEY=VALUE) en os.environ antes de que
nada más arranque. Lo usan tanto la API como la CLI de migraciones.

POLÍTICA:
    Un .env ausente o ilegible NO es un error en este paso: se registra
    un warning y se devuelve False. Los consumidores (Settings, conexión)
    verán valores vacíos más tarde.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Set, Union

from dotenv import find_dotenv, load_dotenv

from movies_api.shared.logging.logger import get_logger

logger = get_logger("config.env")

# Claves que la aplicación espera encontrar en el .env
DATABASE_KEYS = (
    "DATABASE_HOST",
    "DATABASE_NAME",
    "DATABASE_USER",
    "DATABASE_PASS",
    "DATABASE_PORT",
)

_loaded_files: Set[str] = set()


def load_env(
    path: Optional[Union[str, Path]] = None,
    override: bool = False,
    force: bool = False,
) -> bool:
    """
    Carga un .env en el entorno del proceso.

    Args:
        path: Ruta al archivo. Si es None se busca hacia arriba desde el cwd.
        override: Sobrescribir variables ya presentes en el entorno.
        force: Releer aunque el archivo ya se haya cargado en este proceso.

    Returns:
        True si el archivo se leyó (ahora o antes), False si no existe
        o no se pudo leer.
    """
    if path is None:
        found = find_dotenv(usecwd=True)
        if not found:
            logger.warning("No se encontró archivo .env desde %s", os.getcwd())
            return False
        path = found

    resolved = str(Path(path).resolve())
    if resolved in _loaded_files and not force:
        return True

    if not os.path.isfile(resolved):
        logger.warning("Archivo .env no encontrado: %s", resolved)
        return False

    try:
        load_dotenv(resolved, override=override, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("No se pudo leer %s: %s", resolved, e)
        return False

    _loaded_files.add(resolved)
    logger.debug("Variables de entorno cargadas desde %s", resolved)
    return True


def env(key: str, default: str = "") -> str:
    """Lookup en el entorno; una clave ausente devuelve '' (falsy)."""
    return os.environ.get(key, default)


def missing_keys(keys=DATABASE_KEYS) -> list:
    """Claves esperadas que no tienen valor en el entorno."""
    return [key for key in keys if not env(key)]


def reset_loaded() -> None:
    """Olvida qué archivos se cargaron (útil para tests)."""
    _loaded_files.clear()
