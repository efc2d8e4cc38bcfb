"""API endpoint modules."""

from .auth import router as auth_router
from .phrases import router as phrases_router
from .usage import router as usage_router

__all__ = [
    "auth_router",
    "phrases_router",
    "usage_router",
]
