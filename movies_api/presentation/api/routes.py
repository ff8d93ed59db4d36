"""
Movies API – API Routes (FastAPI)
==================================
Endpoints disponibles:
  GET  /api/health             → health check (no toca la base de datos)
  GET  /api/movies             → listado paginado
  GET  /api/movies/{movie_id}  → una película
  POST /api/movies             → crear película
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from movies_api.container import Container, get_container
from movies_api.domain.entities.movie import Movie
from movies_api.domain.exceptions import MovieNotFoundError
from movies_api.domain.repositories.movie_repository import IMovieRepository
from movies_api.presentation.api.schemas import MovieIn, MovieList, MovieOut
from movies_api.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()


def get_movie_repository(container: Container = Depends(get_container)) -> IMovieRepository:
    """Dependency: repositorio desde el contenedor global."""
    return container.movie_repository


@router.get("/api/health")
async def health_check(container: Container = Depends(get_container)) -> dict:
    """Health check para monitoreo."""
    return {
        "status": "ok",
        "service": "movies_api",
        "environment": container.settings.app_env,
        "database_connected": container.has_connection,
    }


@router.get("/api/movies", response_model=MovieList)
async def list_movies(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    repository: IMovieRepository = Depends(get_movie_repository),
) -> dict:
    movies = await repository.list_all(limit=limit, offset=offset)
    return {"count": len(movies), "movies": [m.to_dict() for m in movies]}


@router.get("/api/movies/{movie_id}", response_model=MovieOut)
async def get_movie(
    movie_id: int,
    repository: IMovieRepository = Depends(get_movie_repository),
) -> dict:
    movie = await repository.find_by_id(movie_id)
    if movie is None:
        raise MovieNotFoundError(movie_id)
    return movie.to_dict()


@router.post("/api/movies", response_model=MovieOut, status_code=201)
async def create_movie(
    body: MovieIn,
    repository: IMovieRepository = Depends(get_movie_repository),
) -> dict:
    movie = await repository.add(Movie(**body.model_dump()))
    logger.info("Película creada: id=%s name=%s", movie.id, movie.name)
    return movie.to_dict()
