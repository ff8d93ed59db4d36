"""
Movies API – Domain Repository Interface: Movie
================================================
Contrato de persistencia de películas. La implementación MySQL vive en
infrastructure; los tests usan dobles en memoria.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from movies_api.domain.entities.movie import Movie


class IMovieRepository(ABC):
    """
    Interfaz abstracta para repositorio de películas.

    Todas las operaciones son async para no bloquear el event loop.
    """

    @abstractmethod
    async def list_all(self, limit: int = 100, offset: int = 0) -> List[Movie]:
        """Películas ordenadas por id."""
        pass

    @abstractmethod
    async def find_by_id(self, movie_id: int) -> Optional[Movie]:
        pass

    @abstractmethod
    async def add(self, movie: Movie) -> Movie:
        """
        Inserta una película.

        Returns:
            La misma entidad con `id` asignado.
        """
        pass
