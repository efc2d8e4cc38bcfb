"""HTTP API for Phrase Studio."""

from .endpoints import auth_router, phrases_router, usage_router

__all__ = ["auth_router", "phrases_router", "usage_router"]
