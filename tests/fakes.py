"""
Test doubles and message builders shared by the test modules.
"""

import asyncio

from wolfram_sim import SimulationEvent
from wolfram_sim.clients import (
    SimulatorTransport,
    InitializeResponse,
    StepResponse,
    SimulationStateUpdate,
)


END_OF_STREAM = object()


class FakeTransport(SimulatorTransport):
    """Scripted stand-in for the simulation service.

    Unary replies are queued per method with ``reply(method, result)``; a queued
    exception is raised instead of returned. ``hold(method)`` returns an event the
    next call to that method waits on before answering. The RunSimulation stream
    yields whatever is put on ``stream`` until END_OF_STREAM (or an exception) arrives.
    """

    def __init__(self):
        self.calls = []
        self.replies = {}
        self.gates = {}
        self.stream = asyncio.Queue()
        self.streams_opened = 0
        self.streams_closed = 0
        self.closed = False

    def reply(self, method: str, result) -> None:
        self.replies.setdefault(method, []).append(result)

    def hold(self, method: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates.setdefault(method, []).append(gate)
        return gate

    def methods_called(self) -> list:
        return [method for method, _ in self.calls]

    async def _answer(self, method: str, request=None):
        self.calls.append((method, request))
        queued = self.replies.get(method)
        if not queued:
            raise AssertionError(f"No scripted reply for {method}")
        result = queued.pop(0)
        gates = self.gates.get(method)
        if gates:
            await gates.pop(0).wait()
        if isinstance(result, BaseException):
            raise result
        return result

    async def initialize(self, request):
        return await self._answer("InitializeSimulation", request)

    async def step(self, request):
        return await self._answer("StepSimulation", request)

    async def stop(self):
        return await self._answer("StopSimulation")

    async def get_current_state(self):
        return await self._answer("GetCurrentState")

    async def save_hypergraph(self, request):
        return await self._answer("SaveHypergraph", request)

    async def load_hypergraph(self, request):
        return await self._answer("LoadHypergraph", request)

    async def list_examples(self):
        return await self._answer("ListPredefinedExamples")

    async def run(self, request):
        self.calls.append(("RunSimulation", request))
        self.streams_opened += 1
        try:
            while True:
                item = await self.stream.get()
                if item is END_OF_STREAM:
                    return
                if isinstance(item, BaseException):
                    raise item
                yield item
        finally:
            self.streams_closed += 1

    async def aclose(self):
        self.closed = True


async def settle(rounds: int = 10) -> None:
    """Let pending tasks (the stream consumer) run until they block."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def make_events(count: int, start: int = 0, step_number: int = 1) -> tuple:
    """Distinct events e{start}..e{start+count-1}."""
    return tuple(
        SimulationEvent(id=f"e{i}", rule_id_applied="edge_split", step_number=step_number)
        for i in range(start, start + count)
    )


def init_ok(snapshot, message="Simulation initialized successfully"):
    return InitializeResponse(success=True, message=message, initial_hypergraph_state=snapshot)


def step_ok(snapshot, events=(), step_number=None, message="Step completed"):
    return StepResponse(
        success=True,
        message=message,
        new_hypergraph_state=snapshot,
        events_occurred=tuple(events),
        current_step_number=snapshot.step_number if step_number is None else step_number,
    )


def update(snapshot, events=(), step_number=None, status=""):
    return SimulationStateUpdate(
        current_graph=snapshot,
        recent_events=tuple(events),
        step_number=snapshot.step_number if step_number is None else step_number,
        is_running=True,
        status_message=status,
    )
