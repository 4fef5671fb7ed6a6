"""Simulation service clients: wire schema, transport seam, HTTP client, errors."""

from .errors import (
    SimulatorError,
    SimulatorTransportError,
    SimulatorProtocolError,
    SimulatorApplicationError,
)
from .messages import (
    SERVICE_NAME,
    InitializeRequest,
    InitializeResponse,
    StepRequest,
    StepResponse,
    RunRequest,
    SimulationStateUpdate,
    StopResponse,
    SaveHypergraphRequest,
    SaveHypergraphResponse,
    LoadHypergraphRequest,
    LoadHypergraphResponse,
    PredefinedExampleInfo,
    ListPredefinedExamplesResponse,
)
from .transport import SimulatorTransport
from .http_client import HttpSimulatorClient, method_path

__all__ = [
    # Errors
    "SimulatorError",
    "SimulatorTransportError",
    "SimulatorProtocolError",
    "SimulatorApplicationError",
    # Schema
    "SERVICE_NAME",
    "InitializeRequest",
    "InitializeResponse",
    "StepRequest",
    "StepResponse",
    "RunRequest",
    "SimulationStateUpdate",
    "StopResponse",
    "SaveHypergraphRequest",
    "SaveHypergraphResponse",
    "LoadHypergraphRequest",
    "LoadHypergraphResponse",
    "PredefinedExampleInfo",
    "ListPredefinedExamplesResponse",
    # Transport
    "SimulatorTransport",
    "HttpSimulatorClient",
    "method_path",
]
