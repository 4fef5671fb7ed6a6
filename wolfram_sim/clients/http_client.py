"""
HTTP client for the simulation service.

Speaks JSON over HTTP: each RPC is a POST to ``/{service}/{Method}`` with the
camelCase request body, answered with the camelCase response body.
RunSimulation answers with one JSON object per line (an SSE-style ``data: ``
prefix is accepted too) until the server ends the run.
"""

import json
from typing import AsyncIterator, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from ..config import SimulatorConfig
from ..hypergraph.state import CamelModel
from .errors import SimulatorProtocolError, SimulatorTransportError
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
    ListPredefinedExamplesResponse,
)
from .transport import SimulatorTransport


ResponseT = TypeVar("ResponseT", bound=CamelModel)


def method_path(method: str) -> str:
    """URL path for an RPC method name."""
    return f"/{SERVICE_NAME}/{method}"


def _parse(method: str, data, response_model: Type[ResponseT]) -> ResponseT:
    """Validate a decoded reply against its schema."""
    if data is None:
        raise SimulatorProtocolError(f"{method}: no response received")
    try:
        return response_model.model_validate(data)
    except ValidationError as e:
        raise SimulatorProtocolError(
            f"{method}: malformed response ({e.error_count()} schema errors): {e.errors()[0]['msg']}"
        ) from e


def _status_error(method: str, e: httpx.HTTPStatusError) -> SimulatorTransportError:
    error_detail = ""
    try:
        error_data = e.response.json()
        error_detail = f": {error_data.get('message', str(error_data))}"
    except Exception:
        error_detail = f": {e.response.text[:200]}" if e.response.text else ""
    return SimulatorTransportError(
        f"{method} failed (HTTP {e.response.status_code}){error_detail}"
    )


class HttpSimulatorClient(SimulatorTransport):
    """Async client for the simulation service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Service URL. Defaults to WOLFRAM_SIM_URL / http://localhost:8080.
            timeout: Seconds before a call gives up; None waits indefinitely.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        if base_url is None:
            base_url = SimulatorConfig.from_env().server_url
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    @classmethod
    def from_config(cls, config: SimulatorConfig) -> "HttpSimulatorClient":
        return cls(base_url=config.server_url, timeout=config.request_timeout)

    async def _call(
        self,
        method: str,
        request: Optional[CamelModel],
        response_model: Type[ResponseT],
    ) -> ResponseT:
        payload = request.to_wire() if request is not None else {}
        try:
            response = await self._client.post(method_path(method), json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise _status_error(method, e) from e
        except httpx.TimeoutException as e:
            raise SimulatorTransportError(f"{method} timed out") from e
        except httpx.RequestError as e:
            raise SimulatorTransportError(f"{method} request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise SimulatorProtocolError(f"{method}: response is not JSON") from e
        return _parse(method, data, response_model)

    async def initialize(self, request: InitializeRequest) -> InitializeResponse:
        return await self._call("InitializeSimulation", request, InitializeResponse)

    async def step(self, request: StepRequest) -> StepResponse:
        return await self._call("StepSimulation", request, StepResponse)

    async def stop(self) -> StopResponse:
        return await self._call("StopSimulation", None, StopResponse)

    async def get_current_state(self) -> SimulationStateUpdate:
        return await self._call("GetCurrentState", None, SimulationStateUpdate)

    async def save_hypergraph(self, request: SaveHypergraphRequest) -> SaveHypergraphResponse:
        return await self._call("SaveHypergraph", request, SaveHypergraphResponse)

    async def load_hypergraph(self, request: LoadHypergraphRequest) -> LoadHypergraphResponse:
        return await self._call("LoadHypergraph", request, LoadHypergraphResponse)

    async def list_examples(self) -> ListPredefinedExamplesResponse:
        return await self._call("ListPredefinedExamples", None, ListPredefinedExamplesResponse)

    async def run(self, request: RunRequest) -> AsyncIterator[SimulationStateUpdate]:
        """Stream RunSimulation updates.

        Yields:
            SimulationStateUpdate per server message, until the server ends the run
        """
        method = "RunSimulation"
        try:
            async with self._client.stream(
                "POST",
                method_path(method),
                json=request.to_wire(),
            ) as response:
                if response.is_error:
                    await response.aread()
                response.raise_for_status()
                async for line in response.aiter_lines():
                    line = line.strip()
                    if not line or line.startswith(":"):
                        continue
                    if line.startswith("data:"):
                        line = line[5:].strip()
                    if line == "[DONE]":
                        break
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError as e:
                        raise SimulatorProtocolError(f"{method}: stream message is not JSON") from e
                    yield _parse(method, data, SimulationStateUpdate)
        except httpx.HTTPStatusError as e:
            raise _status_error(method, e) from e
        except httpx.RequestError as e:
            raise SimulatorTransportError(f"{method} stream failed: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpSimulatorClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
