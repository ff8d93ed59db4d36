from movies_api.presentation.api.routes import router

__all__ = ["router"]
