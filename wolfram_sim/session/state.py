"""Session lifecycle phases and the immutable state snapshot handed to consumers."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..hypergraph.state import HypergraphState, SimulationEvent


INITIAL_STATUS = "Ready to initialize simulation"


class Phase(str, Enum):
    """Lifecycle phase of a simulation session."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPING = "stopping"


@dataclass(frozen=True)
class SessionState:
    """Read-only view of a session. The controller swaps in a new one per mutation."""
    phase: Phase = Phase.UNINITIALIZED
    hypergraph_state: Optional[HypergraphState] = None
    current_step_number: int = 0
    recent_events: Tuple[SimulationEvent, ...] = ()
    event_history: Tuple[SimulationEvent, ...] = ()
    status_message: str = INITIAL_STATUS
    error_message: Optional[str] = None
    is_loading: bool = False
    selected_example: str = "single_edge"
    update_interval_ms: int = 500

    @property
    def is_initialized(self) -> bool:
        return self.phase not in (Phase.UNINITIALIZED, Phase.INITIALIZING)

    @property
    def is_running(self) -> bool:
        return self.phase is Phase.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.phase is Phase.PAUSED

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "phase": self.phase.value,
            "isInitialized": self.is_initialized,
            "isRunning": self.is_running,
            "isPaused": self.is_paused,
            "hypergraphState": self.hypergraph_state.to_wire() if self.hypergraph_state else None,
            "currentStepNumber": self.current_step_number,
            "recentEvents": [e.to_wire() for e in self.recent_events],
            "eventHistory": [e.to_wire() for e in self.event_history],
            "statusMessage": self.status_message,
            "errorMessage": self.error_message,
            "isLoading": self.is_loading,
            "selectedExample": self.selected_example,
            "updateInterval": self.update_interval_ms,
        }
