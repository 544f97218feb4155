"""HTTP API for NextAva availability."""

from .routes import router

__all__ = ["router"]
