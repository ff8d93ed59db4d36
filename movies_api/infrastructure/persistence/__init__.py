from movies_api.infrastructure.persistence.connection import create_connection, DEFAULT_PORT

__all__ = ["create_connection", "DEFAULT_PORT"]
