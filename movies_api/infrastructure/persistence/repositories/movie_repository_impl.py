"""
Movie Repository Implementation.

Implementación del repositorio de películas con SQL parametrizado sobre
la conexión aiomysql (DictCursor) que entrega el contenedor.

CONCURRENCIA:
    La conexión es una sola para todo el proceso y aiomysql no admite
    dos queries en vuelo sobre el mismo socket. Cada bloque de cursor
    (query + fetch, y el commit si aplica) se ejecuta bajo `query_lock`.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, List, Optional

import aiomysql

from movies_api.domain.entities.movie import Movie
from movies_api.domain.repositories.movie_repository import IMovieRepository
from movies_api.shared.logging.logger import get_logger

logger = get_logger("infrastructure.movie_repository")

ConnectionProvider = Callable[[], Awaitable[aiomysql.Connection]]

_COLUMNS = "`id`, `name`, `year`, `director`, `summary`"


class MovieRepositoryImpl(IMovieRepository):
    """
    Repositorio de películas sobre MySQL.

    Recibe un proveedor de conexión (normalmente `container.connection`)
    en lugar de la conexión misma: así la conexión sigue siendo perezosa
    hasta la primera query. `query_lock` debe ser el mismo para todo lo
    que comparta esa conexión (el contenedor pasa el suyo).
    """

    def __init__(self, connection_provider: ConnectionProvider, query_lock: Optional[asyncio.Lock] = None):
        self._connection_provider = connection_provider
        self._query_lock = query_lock or asyncio.Lock()

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[aiomysql.Connection]:
        async with self._query_lock:
            yield await self._connection_provider()

    async def list_all(self, limit: int = 100, offset: int = 0) -> List[Movie]:
        async with self._session() as conn:
            async with conn.cursor() as cursor:
                await cursor.execute(
                    f"SELECT {_COLUMNS} FROM `movies` ORDER BY `id` LIMIT %s OFFSET %s",
                    (limit, offset),
                )
                rows = await cursor.fetchall()
        return [Movie.from_row(row) for row in rows]

    async def find_by_id(self, movie_id: int) -> Optional[Movie]:
        async with self._session() as conn:
            async with conn.cursor() as cursor:
                await cursor.execute(
                    f"SELECT {_COLUMNS} FROM `movies` WHERE `id` = %s",
                    (movie_id,),
                )
                row = await cursor.fetchone()
        return Movie.from_row(row) if row else None

    async def add(self, movie: Movie) -> Movie:
        async with self._session() as conn:
            async with conn.cursor() as cursor:
                await cursor.execute(
                    "INSERT INTO `movies` (`name`, `year`, `director`, `summary`) "
                    "VALUES (%s, %s, %s, %s)",
                    (movie.name, movie.year, movie.director, movie.summary),
                )
                movie.id = cursor.lastrowid
            if not conn.get_autocommit():
                await conn.commit()

        logger.debug(f"Película guardada: id={movie.id} name={movie.name}")
        return movie
