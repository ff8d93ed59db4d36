from movies_api.domain.entities.movie import Movie

__all__ = ["Movie"]
