"""
Movies API – Excepciones
=========================
Errores propios de la aplicación y de la herramienta de migraciones.

Los errores del driver MySQL (pymysql.err.*) NO se envuelven: se propagan
tal cual hasta el caller.

JERARQUÍA:
    MoviesApiError (base)
    ├── ConfigurationError
    │   └── UnknownEnvironmentError
    ├── MovieNotFoundError
    └── MigrationError
        ├── InvalidMigrationError
        ├── DuplicateMigrationError
        └── IrreversibleMigrationError
"""

from __future__ import annotations

from typing import Optional


class MoviesApiError(Exception):
    """Excepción base de la aplicación."""

    def __init__(self, message: str, code: str = "MOVIES_API_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class ConfigurationError(MoviesApiError):
    """Configuración ausente o ilegible (.env, settings, migrations.yml)."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message, code="CONFIGURATION_ERROR")
        self.source = source


class UnknownEnvironmentError(ConfigurationError):
    """El entorno pedido (-e) no existe en el archivo de migraciones."""

    def __init__(self, environment: str, available: Optional[list] = None):
        available = available or []
        super().__init__(
            f"Entorno desconocido: '{environment}' "
            f"(disponibles: {', '.join(available) or 'ninguno'})"
        )
        self.code = "UNKNOWN_ENVIRONMENT"
        self.environment = environment
        self.available = available


class MovieNotFoundError(MoviesApiError):
    def __init__(self, movie_id: int):
        super().__init__(f"Película no encontrada: id={movie_id}", code="MOVIE_NOT_FOUND")
        self.movie_id = movie_id


class MigrationError(MoviesApiError):
    """Error base de la herramienta de migraciones."""

    def __init__(self, message: str, code: str = "MIGRATION_ERROR", version: Optional[int] = None):
        super().__init__(message, code=code)
        self.version = version


class InvalidMigrationError(MigrationError):
    """Archivo o clase de migración mal formados."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, code="INVALID_MIGRATION")
        self.path = path


class DuplicateMigrationError(MigrationError):
    """Dos migraciones comparten versión o nombre de clase."""

    def __init__(self, message: str, version: Optional[int] = None):
        super().__init__(message, code="DUPLICATE_MIGRATION", version=version)


class IrreversibleMigrationError(MigrationError):
    """Una operación de change() no tiene inversa automática."""

    def __init__(self, message: str, version: Optional[int] = None):
        super().__init__(message, code="IRREVERSIBLE_MIGRATION", version=version)
