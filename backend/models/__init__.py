"""Pydantic models for request/response schemas."""

from .requests import (
    InitializeSimulationRequest,
    StepSimulationRequest,
    SaveHypergraphRequest,
    LoadHypergraphRequest,
    UpdateSettingsRequest,
)

__all__ = [
    "InitializeSimulationRequest",
    "StepSimulationRequest",
    "SaveHypergraphRequest",
    "LoadHypergraphRequest",
    "UpdateSettingsRequest",
]
