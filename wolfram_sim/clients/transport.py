"""Transport seam between the session controller and the simulation service."""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from .messages import (
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
    ListPredefinedExamplesResponse,
)


class SimulatorTransport(ABC):
    """
    RPC contract consumed by the session controller.

    Implementations raise SimulatorTransportError when a call cannot complete and
    SimulatorProtocolError when a reply does not match the schema. A reply with
    success=false is returned as-is; judging it is the caller's job.
    """

    @abstractmethod
    async def initialize(self, request: InitializeRequest) -> InitializeResponse:
        ...

    @abstractmethod
    async def step(self, request: StepRequest) -> StepResponse:
        ...

    @abstractmethod
    def run(self, request: RunRequest) -> AsyncIterator[SimulationStateUpdate]:
        """Open the server stream. Iterating yields one update per message;
        closing or cancelling the iteration closes the stream."""

    @abstractmethod
    async def stop(self) -> StopResponse:
        ...

    @abstractmethod
    async def get_current_state(self) -> SimulationStateUpdate:
        ...

    @abstractmethod
    async def save_hypergraph(self, request: SaveHypergraphRequest) -> SaveHypergraphResponse:
        ...

    @abstractmethod
    async def load_hypergraph(self, request: LoadHypergraphRequest) -> LoadHypergraphResponse:
        ...

    @abstractmethod
    async def list_examples(self) -> ListPredefinedExamplesResponse:
        ...

    async def aclose(self) -> None:
        """Release connections. No-op by default."""
