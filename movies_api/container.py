"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias que
gestiona la conexión a MySQL y los repositorios de la aplicación.

La conexión se crea perezosamente: nada toca la base de datos hasta que
alguien pide `await container.connection()`. A partir de ahí se reutiliza
la misma conexión durante toda la vida del proceso.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from movies_api.domain.repositories.movie_repository import IMovieRepository
from movies_api.shared.config.settings import Settings, get_settings
from movies_api.shared.logging.logger import get_logger

logger = get_logger("container")

ConnectionFactory = Callable[[Settings], Awaitable[Any]]


async def default_connection_factory(settings: Settings) -> Any:
    """Fábrica de producción: una conexión aiomysql desde `settings.db`."""
    from movies_api.infrastructure.persistence.connection import create_connection
    return await create_connection(
        settings.db,
        charset=settings.db_charset,
        autocommit=settings.db_autocommit,
    )


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Registro de objetos construidos bajo demanda. Cada dependencia se
    construye una única vez y se cachea en el contenedor.
    """

    # Configuración
    settings: Settings = field(default_factory=get_settings)
    connection_factory: ConnectionFactory = default_connection_factory

    # Instancias cacheadas
    _connection: Optional[Any] = None
    _movie_repository: Optional[IMovieRepository] = None

    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    # Serializa las queries: la conexión no admite dos en vuelo
    query_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    # ==================== Database ====================

    async def connection(self) -> Any:
        """
        Obtiene o crea la conexión (singleton por contenedor).

        Los errores del driver se propagan sin capturar.
        """
        if self._connection is not None:
            return self._connection
        async with self._lock:
            if self._connection is None:
                self._connection = await self.connection_factory(self.settings)
                logger.info("Conexión a base de datos creada")
        return self._connection

    @property
    def has_connection(self) -> bool:
        return self._connection is not None

    # ==================== Repositories ====================

    @property
    def movie_repository(self) -> IMovieRepository:
        """Obtiene el repositorio de películas."""
        if self._movie_repository is None:
            from movies_api.infrastructure.persistence.repositories.movie_repository_impl import MovieRepositoryImpl
            self._movie_repository = MovieRepositoryImpl(self.connection, self.query_lock)
        return self._movie_repository

    # ==================== Lifecycle ====================

    async def close(self) -> None:
        """Cierra la conexión si llegó a abrirse."""
        conn, self._connection = self._connection, None
        if conn is not None:
            conn.close()
            logger.info("Conexión a base de datos cerrada")

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._connection = None
        self._movie_repository = None

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests con mocks).

        Args:
            name: Nombre de la dependencia (ej: 'movie_repository')
            instance: Instancia mock a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Obtiene la instancia global del contenedor.

    Patrón Singleton para asegurar una única instancia
    compartida en toda la aplicación.
    """
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Resetea el contenedor global."""
    global _container
    if _container is not None:
        _container.reset()
    _container = None


def init_container(
    settings: Optional[Settings] = None,
    connection_factory: Optional[ConnectionFactory] = None,
) -> Container:
    """
    Inicializa el contenedor con configuración específica.

    Args:
        settings: Configuración opcional. Si es None, usa get_settings().
        connection_factory: Fábrica alternativa de conexión.

    Returns:
        Container inicializado
    """
    global _container
    if settings is None:
        settings = get_settings()
    _container = Container(
        settings=settings,
        connection_factory=connection_factory or default_connection_factory,
    )
    return _container


# ==================== Testing Utilities ====================

def create_test_container(settings: Optional[Settings] = None, **mocks) -> Container:
    """
    Crea un contenedor de pruebas con mocks inyectados.

    Ejemplo:
        container = create_test_container(movie_repository=fake_repo)
    """
    container = Container(settings=settings or Settings(_env_file=None))
    for name, mock in mocks.items():
        container.override(name, mock)
    return container
