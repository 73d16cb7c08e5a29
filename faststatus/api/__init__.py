"""HTTP layer: the /current router and content negotiation."""
from .routes import router

__all__ = ["router"]
