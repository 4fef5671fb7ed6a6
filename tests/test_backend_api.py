"""
Tests for the FastAPI backend, with the controller wired to a FakeTransport.
"""

import pytest
from fastapi.testclient import TestClient

from backend.main import app
from backend.services import get_controller, set_controller, session_payload
from wolfram_sim import SessionController, project
from wolfram_sim.clients import StopResponse

from fakes import init_ok, step_ok


@pytest.fixture
def api(transport, config):
    """Start the app around a controller that talks to the fake transport."""
    set_controller(SessionController(transport, config))
    with TestClient(app) as client:
        yield client
    set_controller(None)


@pytest.fixture
def no_controller():
    set_controller(None)
    yield
    set_controller(None)


class TestHealthAndState:

    def test_health(self, api):
        response = api.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "phase": "uninitialized", "clients": 0}

    def test_initial_state(self, api):
        data = api.get("/api/simulation/state").json()

        assert data["state"]["isInitialized"] is False
        assert data["state"]["statusMessage"] == "Ready to initialize simulation"
        assert data["state"]["updateInterval"] == 250
        assert data["graph"] == {"nodes": [], "links": []}

    def test_missing_controller_is_503(self, no_controller):
        # Without the lifespan the route sees no controller at all
        client = TestClient(app)
        response = client.get("/api/simulation/state")

        assert response.status_code == 503

    def test_shutdown_closes_transport(self, transport, config):
        set_controller(SessionController(transport, config))
        with TestClient(app):
            pass

        assert transport.closed is True
        assert get_controller() is None


class TestCommands:

    def test_initialize_and_step(self, api, transport, single_edge, split_edge, edge_split_event):
        transport.reply("InitializeSimulation", init_ok(single_edge))
        transport.reply("StepSimulation", step_ok(split_edge, events=[edge_split_event]))

        data = api.post("/api/simulation/initialize", json={"config_id": "single_edge"}).json()
        assert data["state"]["isInitialized"] is True
        assert [n["id"] for n in data["graph"]["nodes"]] == ["0", "1"]

        data = api.post("/api/simulation/step", json={"num_steps": 1}).json()
        assert data["state"]["currentStepNumber"] == 1
        assert data["state"]["recentEvents"][0]["ruleIdApplied"] == "edge_split"
        assert len(data["graph"]["links"]) == 2

        assert transport.methods_called() == ["InitializeSimulation", "StepSimulation"]

    def test_initialize_from_raw_hypergraph(self, api, transport, single_edge):
        transport.reply("InitializeSimulation", init_ok(single_edge))

        response = api.post("/api/simulation/initialize", json={
            "initial_hypergraph": single_edge.to_wire(),
            "rule_ids": ["edge_split"],
        })

        assert response.status_code == 200
        _, request = transport.calls[0]
        assert request.initial_hypergraph == single_edge
        assert request.rule_ids_to_use == ("edge_split",)

    def test_invalid_command_is_reported_in_state(self, api, transport):
        data = api.post("/api/simulation/step", json={"num_steps": 1}).json()

        assert data["state"]["isInitialized"] is False
        assert data["state"]["statusMessage"] == "Cannot step while uninitialized"
        assert transport.calls == []

    def test_run_pause_stop(self, api, transport, single_edge):
        transport.reply("InitializeSimulation", init_ok(single_edge))
        transport.reply("StopSimulation", StopResponse(success=True, message="Simulation stopped"))
        api.post("/api/simulation/initialize", json={"config_id": "single_edge"})

        assert api.post("/api/simulation/run").json()["state"]["isRunning"] is True
        paused = api.post("/api/simulation/pause").json()["state"]
        assert paused["isPaused"] is True
        stopped = api.post("/api/simulation/stop").json()["state"]
        assert stopped["isRunning"] is False
        assert stopped["isPaused"] is False

    def test_reset(self, api, transport, single_edge):
        transport.reply("InitializeSimulation", init_ok(single_edge))
        api.post("/api/simulation/initialize", json={"config_id": "single_edge"})

        data = api.post("/api/simulation/reset").json()

        assert data["state"]["isInitialized"] is False
        assert data["graph"] == {"nodes": [], "links": []}


class TestSettingsAndExamples:

    def test_update_settings(self, api):
        data = api.put("/api/simulation/settings", json={
            "selectedExample": "triangle",
            "updateInterval": 1000,
        }).json()

        assert data["state"]["selectedExample"] == "triangle"
        assert data["state"]["updateInterval"] == 1000

    def test_update_settings_accepts_snake_case(self, api):
        data = api.put("/api/simulation/settings", json={"selected_example": "small_path"}).json()

        assert data["state"]["selectedExample"] == "small_path"
        assert data["state"]["updateInterval"] == 250

    def test_clear_error(self, api):
        api.put("/api/simulation/settings", json={"updateInterval": 0})
        assert api.get("/api/simulation/state").json()["state"]["errorMessage"]

        data = api.delete("/api/simulation/error").json()
        assert data["state"]["errorMessage"] is None

    def test_examples_fall_back_to_catalog(self, api):
        # No scripted reply, so the service call fails
        examples = api.get("/api/simulation/examples").json()

        names = [example["name"] for example in examples]
        assert "single_edge" in names
        assert "triangle" in names


class TestWebSocket:

    def test_initial_message(self, api):
        with api.websocket_connect("/ws/simulation") as websocket:
            message = websocket.receive_json()

        assert message["type"] == "initial"
        assert message["state"]["statusMessage"] == "Ready to initialize simulation"
        assert message["graph"] == {"nodes": [], "links": []}

    def test_ping_pong(self, api):
        with api.websocket_connect("/ws/simulation") as websocket:
            websocket.receive_json()
            websocket.send_text("ping")
            assert websocket.receive_text() == "pong"

class TestSessionPayload:

    @pytest.mark.anyio
    async def test_graph_matches_the_state_sent(self, no_controller, ready_controller, transport, single_edge, split_edge):
        controller = await ready_controller()
        set_controller(controller)
        earlier = controller.state
        transport.reply("StepSimulation", step_ok(split_edge))
        await controller.step(1)

        # The controller has moved on; the payload still describes `earlier`
        message = session_payload(earlier)

        assert message["state"]["currentStepNumber"] == 0
        assert message["graph"] == project(single_edge).to_dict()
        assert message["graph"] != controller.project().to_dict()
