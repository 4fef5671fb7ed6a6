"""Backend services for business logic."""

from .state import (
    get_controller,
    set_controller,
    session_connections,
)
from .websocket import notify_session_update, on_session_change, session_payload

__all__ = [
    # State
    "get_controller",
    "set_controller",
    "session_connections",
    # WebSocket
    "notify_session_update",
    "on_session_change",
    "session_payload",
]
