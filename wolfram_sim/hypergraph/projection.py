"""
Hypergraph to visual graph projection.

Turns an n-ary hypergraph snapshot into the node/link structure a force-directed
renderer consumes:

- every atom becomes an atom node
- a binary relation becomes one direct link between its two atoms
- a relation of arity > 2 becomes a synthetic relation-center node ``rel_{i}``
  with one spoke per member atom
- relations of arity 0 or 1 have no visual form

The renderer keys layout on node ids, so output order and ids depend only on the
snapshot. Links touching atoms missing from the snapshot are dropped.
"""

from dataclasses import dataclass, asdict, field
from typing import List, Optional

from .state import HypergraphState


ATOM = "atom"
RELATION = "relation"

BINARY = "binary"
HYPEREDGE = "hyperedge"

# Display attributes depend only on kind
NODE_STYLES = {
    ATOM: {"color": "#3498db", "size": 8},
    RELATION: {"color": "#e67e22", "size": 6},
}

LINK_STYLES = {
    BINARY: {"color": "#e74c3c", "width": 2},
    HYPEREDGE: {"color": "#95a5a6", "width": 1},
}


@dataclass(frozen=True)
class VisualNode:
    """Renderable node: an atom or a synthesized relation center."""
    id: str
    name: str
    kind: str
    color: str
    size: int


@dataclass(frozen=True)
class VisualLink:
    """Renderable link: a binary edge or a hyperedge spoke."""
    source: str
    target: str
    kind: str
    color: str
    width: int


@dataclass(frozen=True)
class VisualGraph:
    """Nodes and links handed to the layout engine."""
    nodes: List[VisualNode] = field(default_factory=list)
    links: List[VisualLink] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Force-graph shape: {"nodes": [...], "links": [...]}."""
        return {
            "nodes": [asdict(n) for n in self.nodes],
            "links": [asdict(l) for l in self.links],
        }


def relation_node_id(index: int) -> str:
    """Id of the center node for the relation at ``index``."""
    return f"rel_{index}"


def _atom_node(atom_id: str) -> VisualNode:
    return VisualNode(id=atom_id, name=atom_id, kind=ATOM, **NODE_STYLES[ATOM])


def _relation_node(index: int) -> VisualNode:
    return VisualNode(
        id=relation_node_id(index),
        name=f"R{index}",
        kind=RELATION,
        **NODE_STYLES[RELATION],
    )


def _link(source: str, target: str, kind: str) -> VisualLink:
    return VisualLink(source=source, target=target, kind=kind, **LINK_STYLES[kind])


def project(snapshot: Optional[HypergraphState]) -> VisualGraph:
    """
    Project a hypergraph snapshot into a visual graph.

    Args:
        snapshot: The snapshot to project, or None for "nothing loaded"

    Returns:
        VisualGraph with atom nodes first (snapshot order), then relation
        centers and links in relation order
    """
    if snapshot is None:
        return VisualGraph()

    nodes: List[VisualNode] = []
    links: List[VisualLink] = []

    known = set()
    for atom in snapshot.atoms:
        if atom.id in known:
            continue
        known.add(atom.id)
        nodes.append(_atom_node(atom.id))

    for index, relation in enumerate(snapshot.relations):
        members = relation.atom_ids

        if len(members) == 2:
            source, target = members
            if source in known and target in known:
                links.append(_link(source, target, BINARY))

        elif len(members) > 2:
            center = relation_node_id(index)
            nodes.append(_relation_node(index))
            for atom_id in members:
                if atom_id in known:
                    links.append(_link(atom_id, center, HYPEREDGE))

        # arity 0 or 1: nothing to draw

    return VisualGraph(nodes=nodes, links=links)
