"""API routers."""

from server.routers.nodes import router

__all__ = ["router"]
