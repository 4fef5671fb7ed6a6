"""
Typed request/response schema for the simulation service.

One pydantic model per request and per response. Responses are validated as
they cross the transport boundary; a ValidationError there means the server
broke the contract and is reported as a protocol failure.
"""

from typing import Optional, Tuple

from pydantic import Field, model_validator

from ..hypergraph.state import CamelModel, HypergraphState, SimulationEvent


SERVICE_NAME = "wolfram_physics_simulator.WolframPhysicsSimulatorService"


# --- Requests ---------------------------------------------------------------

class InitializeRequest(CamelModel):
    """Start from a predefined example or from a caller-supplied hypergraph."""
    predefined_initial_state_id: Optional[str] = None
    initial_hypergraph: Optional[HypergraphState] = None
    rule_ids_to_use: Tuple[str, ...] = ()

    @model_validator(mode="after")
    def check_single_source(self):
        has_id = bool(self.predefined_initial_state_id)
        has_graph = self.initial_hypergraph is not None
        if has_id == has_graph:
            raise ValueError(
                "Exactly one of predefined_initial_state_id or initial_hypergraph is required"
            )
        return self


class StepRequest(CamelModel):
    num_steps: int = Field(default=1, ge=1)


class RunRequest(CamelModel):
    update_interval_ms: int = Field(gt=0)
    max_steps: Optional[int] = Field(default=None, gt=0)
    stop_on_fixed_point: Optional[bool] = None


class SaveHypergraphRequest(CamelModel):
    filename: Optional[str] = None
    overwrite_existing: bool = False
    pretty_print: bool = True


class LoadHypergraphRequest(CamelModel):
    """Load from exactly one source."""
    predefined_example_name: Optional[str] = None
    file_content: Optional[str] = None
    file_path: Optional[str] = None

    @model_validator(mode="after")
    def check_single_source(self):
        sources = [
            s for s in (self.predefined_example_name, self.file_content, self.file_path)
            if s is not None
        ]
        if len(sources) != 1:
            raise ValueError(
                "Exactly one of predefined_example_name, file_content or file_path is required"
            )
        return self


# --- Responses --------------------------------------------------------------

class InitializeResponse(CamelModel):
    success: bool
    message: str = ""
    initial_hypergraph_state: Optional[HypergraphState] = None


class StepResponse(CamelModel):
    success: bool
    message: str = ""
    new_hypergraph_state: Optional[HypergraphState] = None
    events_occurred: Tuple[SimulationEvent, ...] = ()
    current_step_number: int


class SimulationStateUpdate(CamelModel):
    """One message of the RunSimulation stream (also the GetCurrentState reply)."""
    current_graph: HypergraphState
    recent_events: Tuple[SimulationEvent, ...] = ()
    step_number: int
    is_running: bool = True
    status_message: str = ""


class StopResponse(CamelModel):
    success: bool
    message: str = ""
    final_state: Optional[HypergraphState] = None  # not every server sends it


class SaveHypergraphResponse(CamelModel):
    success: bool
    message: str = ""
    file_path: str = ""


class LoadHypergraphResponse(CamelModel):
    success: bool
    message: str = ""
    loaded_state: Optional[HypergraphState] = None


class PredefinedExampleInfo(CamelModel):
    name: str
    description: str = ""
    atom_count: int = 0
    relation_count: int = 0


class ListPredefinedExamplesResponse(CamelModel):
    examples: Tuple[PredefinedExampleInfo, ...] = ()
