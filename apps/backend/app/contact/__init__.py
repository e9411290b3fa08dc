"""Contact form delivery."""

from .routes import router as contact_router

__all__ = ["contact_router"]
