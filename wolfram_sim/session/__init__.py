"""Simulation session lifecycle: the controller and its state model."""

from .state import Phase, SessionState, INITIAL_STATUS
from .controller import SessionController

__all__ = [
    "Phase",
    "SessionState",
    "INITIAL_STATUS",
    "SessionController",
]
