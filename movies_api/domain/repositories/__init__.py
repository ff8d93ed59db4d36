from movies_api.domain.repositories.movie_repository import IMovieRepository

__all__ = ["IMovieRepository"]
