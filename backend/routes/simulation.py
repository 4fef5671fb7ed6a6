"""Simulation session endpoints.

Every command endpoint answers with the resulting session state. Failures of the
simulation service are part of that state (errorMessage/statusMessage), not HTTP
errors.
"""

from fastapi import APIRouter, HTTPException

from wolfram_sim import SessionController

from backend.models import (
    InitializeSimulationRequest,
    StepSimulationRequest,
    SaveHypergraphRequest,
    LoadHypergraphRequest,
    UpdateSettingsRequest,
)
from backend.services import get_controller

router = APIRouter(prefix="/api/simulation", tags=["simulation"])


def _require_controller() -> SessionController:
    controller = get_controller()
    if not controller:
        raise HTTPException(status_code=503, detail="Simulation controller not initialized")
    return controller


def _session_response(controller: SessionController) -> dict:
    return {
        "state": controller.state.to_dict(),
        "graph": controller.project().to_dict(),
    }


@router.get("/state")
async def get_session_state() -> dict:
    """Get the session state and its projected graph."""
    return _session_response(_require_controller())


@router.get("/graph")
async def get_visual_graph() -> dict:
    """Get only the projected node/link graph."""
    return _require_controller().project().to_dict()


@router.get("/examples")
async def list_examples() -> list[dict]:
    """List predefined initial configurations."""
    controller = _require_controller()
    examples = await controller.list_examples()
    return [example.to_wire() for example in examples]


@router.post("/initialize")
async def initialize_simulation(request: InitializeSimulationRequest) -> dict:
    """Start a fresh simulation."""
    controller = _require_controller()
    await controller.initialize(
        request.config_id,
        initial_state=request.initial_hypergraph,
        rule_ids=request.rule_ids,
    )
    return _session_response(controller)


@router.post("/step")
async def step_simulation(request: StepSimulationRequest) -> dict:
    """Apply a fixed number of rewrite steps."""
    controller = _require_controller()
    await controller.step(request.num_steps)
    return _session_response(controller)


@router.post("/run")
async def run_simulation() -> dict:
    """Start streaming updates from the server."""
    controller = _require_controller()
    await controller.run()
    return _session_response(controller)


@router.post("/pause")
async def pause_simulation() -> dict:
    """Pause a running simulation."""
    controller = _require_controller()
    controller.pause()
    return _session_response(controller)


@router.post("/stop")
async def stop_simulation() -> dict:
    """Stop a running or paused simulation."""
    controller = _require_controller()
    await controller.stop()
    return _session_response(controller)


@router.post("/reset")
async def reset_simulation() -> dict:
    """Drop the session and return to the uninitialized state."""
    controller = _require_controller()
    controller.reset()
    return _session_response(controller)


@router.post("/refresh")
async def refresh_simulation() -> dict:
    """Re-read the server's current hypergraph."""
    controller = _require_controller()
    await controller.refresh()
    return _session_response(controller)


@router.post("/save")
async def save_hypergraph(request: SaveHypergraphRequest) -> dict:
    """Save the server's current hypergraph to a file on the server."""
    controller = _require_controller()
    await controller.save_snapshot(
        request.filename,
        overwrite=request.overwrite,
        pretty_print=request.pretty_print,
    )
    return _session_response(controller)


@router.post("/load")
async def load_hypergraph(request: LoadHypergraphRequest) -> dict:
    """Replace the session with a loaded hypergraph."""
    controller = _require_controller()
    await controller.load_snapshot(
        example_name=request.example_name,
        content=request.content,
        file_path=request.file_path,
    )
    return _session_response(controller)


@router.put("/settings")
async def update_settings(request: UpdateSettingsRequest) -> dict:
    """Update the selected example and/or the streaming interval."""
    controller = _require_controller()
    if request.selected_example is not None:
        controller.set_selected_example(request.selected_example)
    if request.update_interval is not None:
        controller.set_update_interval(request.update_interval)
    return _session_response(controller)


@router.delete("/error")
async def clear_error() -> dict:
    """Dismiss the current error message."""
    controller = _require_controller()
    controller.clear_error()
    return _session_response(controller)
