from movies_api.infrastructure.persistence.repositories.movie_repository_impl import MovieRepositoryImpl

__all__ = ["MovieRepositoryImpl"]
