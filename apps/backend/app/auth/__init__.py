"""Authentication helpers for the PDFSuit backend."""

from .dependencies import build_session, get_current_profile, get_current_user
from .middleware import RouteAccessMiddleware, evaluate_route_access
from .routes import router as auth_router

__all__ = [
    "RouteAccessMiddleware",
    "auth_router",
    "build_session",
    "evaluate_route_access",
    "get_current_profile",
    "get_current_user",
]
