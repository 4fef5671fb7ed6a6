"""API route modules."""

from .simulation import router as simulation_router
from .websocket import router as websocket_router

__all__ = [
    "simulation_router",
    "websocket_router",
]
