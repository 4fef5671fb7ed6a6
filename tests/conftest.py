"""
Pytest configuration and shared fixtures.
"""

import pytest

from wolfram_sim import HypergraphState, SimulationEvent, SessionController, SimulatorConfig

from fakes import FakeTransport, init_ok


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def transport():
    """Provide a fresh FakeTransport."""
    return FakeTransport()


@pytest.fixture
def config():
    return SimulatorConfig(update_interval_ms=250, history_cap=50)


@pytest.fixture
def controller(transport, config):
    """Provide a SessionController wired to the fake transport."""
    return SessionController(transport, config)


@pytest.fixture
def single_edge():
    """Two atoms joined by one binary relation, at step 0."""
    return HypergraphState.from_relations([["0", "1"]])


@pytest.fixture
def split_edge():
    """single_edge after one edge_split rewrite: 0--2--1, at step 1."""
    return HypergraphState.from_relations(
        [["0", "2"], ["2", "1"]], atoms=["0", "1", "2"], step_number=1
    )


@pytest.fixture
def edge_split_event():
    return SimulationEvent(
        id="e1",
        rule_id_applied="edge_split",
        atoms_involved_input=("0", "1"),
        atoms_involved_output=("0", "2", "1"),
        step_number=1,
        atoms_created=("2",),
        relations_created=("1", "2"),
        relations_removed=("0",),
        description="Split edge 0--1",
    )


@pytest.fixture
def ready_controller(controller, transport, single_edge):
    """Await the returned coroutine function to get a controller initialized on single_edge."""
    async def _ready():
        transport.reply("InitializeSimulation", init_ok(single_edge))
        await controller.initialize("single_edge")
        return controller
    return _ready
