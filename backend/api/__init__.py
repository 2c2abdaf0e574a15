"""HTTP layer: routers, dependencies and exception handlers."""

from api.routes import router as api_router

__all__ = ["api_router"]
