"""Domain exceptions."""
from movies_api.domain.exceptions.domain_errors import (
    MoviesApiError,
    ConfigurationError,
    UnknownEnvironmentError,
    MovieNotFoundError,
    MigrationError,
    InvalidMigrationError,
    DuplicateMigrationError,
    IrreversibleMigrationError,
)

__all__ = [
    "MoviesApiError",
    "ConfigurationError",
    "UnknownEnvironmentError",
    "MovieNotFoundError",
    "MigrationError",
    "InvalidMigrationError",
    "DuplicateMigrationError",
    "IrreversibleMigrationError",
]
