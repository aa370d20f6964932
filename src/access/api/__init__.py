from access.api.routes import router

__all__ = ["router"]
