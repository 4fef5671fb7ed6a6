"""Hypergraph models and the visual-graph projection."""

from .state import Atom, Relation, HypergraphState, SimulationEvent
from .projection import (
    VisualNode,
    VisualLink,
    VisualGraph,
    project,
    relation_node_id,
)

__all__ = [
    "Atom",
    "Relation",
    "HypergraphState",
    "SimulationEvent",
    "VisualNode",
    "VisualLink",
    "VisualGraph",
    "project",
    "relation_node_id",
]
