"""
Movies API – Settings (Pydantic BaseSettings)
==============================================
Configuración centralizada cargada desde variables de entorno / .env.

La estructura que consume el resto de la app es `settings.db`:

    {"host": ..., "dbname": ..., "user": ..., "pass": ..., "port": ...}

No se valida nada más allá del tipo: un valor ausente llega vacío al
consumidor y el fallo aparece después, al conectar.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from movies_api.domain.exceptions import ConfigurationError


class Settings(BaseSettings):
    # ─── Base de datos (.env) ──────────────────────────────────────────
    database_host: str = Field(default="", description="Host de MySQL")
    database_name: str = Field(default="", description="Nombre de la base de datos")
    database_user: str = Field(default="", description="Usuario de MySQL")
    database_pass: str = Field(default="", description="Password de MySQL")
    database_port: Optional[int] = Field(default=None, description="Puerto de MySQL")

    # ─── Conexión ──────────────────────────────────────────────────────
    db_charset: str = Field(default="utf8mb4", description="Charset de la conexión")
    db_autocommit: bool = Field(default=True, description="Autocommit en la conexión de la API")

    # ─── Aplicación ────────────────────────────────────────────────────
    app_env: str = Field(default="development", description="Nombre del entorno")
    app_debug: bool = Field(default=False, description="Mostrar detalle de errores")
    log_level: str = Field(default="INFO", description="Nivel de logging")

    # ─── Server ────────────────────────────────────────────────────────
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8080)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_ignore_empty": True,
        "extra": "ignore",
    }

    @property
    def db(self) -> Dict[str, Any]:
        """Bloque `db` tal como lo consume la fábrica de conexiones."""
        return {
            "host": self.database_host,
            "dbname": self.database_name,
            "user": self.database_user,
            "pass": self.database_pass,
            "port": self.database_port,
        }

    def as_config(self) -> Dict[str, Any]:
        """Array de settings completo de la aplicación."""
        return {
            "displayErrorDetails": self.app_debug,
            "logger": {
                "name": "movies_api",
                "level": self.log_level,
            },
            "db": self.db,
        }


def load_settings(**overrides: Any) -> Settings:
    """Construye Settings traduciendo errores de pydantic a ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Configuración inválida: {e}", source="settings") from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Instancia única por proceso. `get_settings.cache_clear()` en tests."""
    return load_settings()
