"""Pydantic request models."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from wolfram_sim import HypergraphState


class InitializeSimulationRequest(BaseModel):
    """Request to start a simulation from an example or a raw hypergraph."""
    config_id: Optional[str] = None
    initial_hypergraph: Optional[HypergraphState] = None
    rule_ids: Optional[List[str]] = None


class StepSimulationRequest(BaseModel):
    """Request to apply a number of rewrite steps."""
    num_steps: int = 1


class SaveHypergraphRequest(BaseModel):
    """Request to save the server's current hypergraph."""
    filename: Optional[str] = None
    overwrite: bool = False
    pretty_print: bool = True


class LoadHypergraphRequest(BaseModel):
    """Request to load a hypergraph; exactly one source should be set."""
    example_name: Optional[str] = None
    content: Optional[str] = None
    file_path: Optional[str] = None


class UpdateSettingsRequest(BaseModel):
    """Request to update session preferences (camelCase keys, as in the session state)."""
    model_config = ConfigDict(populate_by_name=True)

    selected_example: Optional[str] = Field(default=None, alias="selectedExample")
    update_interval: Optional[int] = Field(default=None, alias="updateInterval")
