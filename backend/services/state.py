"""
Shared application state.

This module holds global state that needs to be accessed across routes and services.
Using a module for this keeps the state centralized and avoids circular imports.
"""

import asyncio
from typing import Optional, List, Set
from fastapi import WebSocket

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from wolfram_sim import SessionController

# Global session controller
_controller: Optional["SessionController"] = None

# WebSocket connections receiving session updates
session_connections: List[WebSocket] = []

# Pending notification tasks (kept so they are not garbage collected mid-send)
pending_notifications: Set[asyncio.Task] = set()


def get_controller() -> Optional["SessionController"]:
    """Get the global session controller."""
    return _controller


def set_controller(controller: Optional["SessionController"]) -> None:
    """Set the global session controller."""
    global _controller
    _controller = controller
