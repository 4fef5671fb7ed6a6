"""
Client-side session control for a remote hypergraph rewriting simulation.

Package structure:
- clients/: Wire schema, transport seam and the HTTP client for the simulation service
- hypergraph/: Snapshot/event models and the visual-graph projection
- session/: The session controller state machine
- config.py: Environment-driven settings
- examples.py: Built-in catalog of predefined initial configurations
"""

from .config import SimulatorConfig
from .examples import PREDEFINED_EXAMPLES
from .hypergraph import (
    Atom,
    Relation,
    HypergraphState,
    SimulationEvent,
    VisualNode,
    VisualLink,
    VisualGraph,
    project,
)
from .clients import (
    HttpSimulatorClient,
    SimulatorTransport,
    SimulatorError,
    SimulatorTransportError,
    SimulatorProtocolError,
    SimulatorApplicationError,
)
from .session import Phase, SessionState, SessionController

__all__ = [
    'SimulatorConfig',
    'PREDEFINED_EXAMPLES',
    # Hypergraph
    'Atom',
    'Relation',
    'HypergraphState',
    'SimulationEvent',
    'VisualNode',
    'VisualLink',
    'VisualGraph',
    'project',
    # Clients
    'HttpSimulatorClient',
    'SimulatorTransport',
    'SimulatorError',
    'SimulatorTransportError',
    'SimulatorProtocolError',
    'SimulatorApplicationError',
    # Session
    'Phase',
    'SessionState',
    'SessionController',
]
