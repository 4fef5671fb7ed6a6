"""
Hypergraph snapshot and rewrite event models.

These mirror the simulation service's wire shapes. Field names are snake_case in
Python and camelCase on the wire (``atomIds``, ``stepNumber``, ...). Instances
are frozen: once a snapshot or event has been received it is never edited.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire models: camelCase aliases, frozen, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """Dump with wire aliases, leaving out unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Atom(CamelModel):
    """Smallest addressable element; the id is opaque."""
    id: str


class Relation(CamelModel):
    """Ordered tuple of atom ids. Arity 2 is an edge, arity > 2 a hyperedge."""
    atom_ids: Tuple[str, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.atom_ids)


class HypergraphState(CamelModel):
    """Full atom/relation state at one simulation step."""
    atoms: Tuple[Atom, ...] = ()
    relations: Tuple[Relation, ...] = ()
    step_number: int = 0
    # Server-side id allocation hints, not interpreted here
    next_atom_id: int = 0
    next_relation_id: int = 0

    @property
    def atom_ids(self) -> Tuple[str, ...]:
        return tuple(atom.id for atom in self.atoms)

    @classmethod
    def from_relations(cls, relations, atoms=None, step_number: int = 0) -> "HypergraphState":
        """Build a snapshot from plain id sequences.

        Args:
            relations: Iterable of atom-id sequences
            atoms: Optional explicit atom ids; defaults to every id the relations
                mention, in first-appearance order
            step_number: Step the snapshot belongs to
        """
        relations = [tuple(str(a) for a in rel) for rel in relations]
        if atoms is None:
            seen = {}
            for rel in relations:
                for atom_id in rel:
                    seen.setdefault(atom_id, None)
            atoms = list(seen)
        atoms = [str(a) for a in atoms]
        return cls(
            atoms=tuple(Atom(id=a) for a in atoms),
            relations=tuple(Relation(atom_ids=rel) for rel in relations),
            step_number=step_number,
            next_atom_id=len(atoms),
            next_relation_id=len(relations),
        )


class SimulationEvent(CamelModel):
    """Record of one rewrite rule application."""
    id: str
    rule_id_applied: str
    atoms_involved_input: Tuple[str, ...] = ()
    atoms_involved_output: Tuple[str, ...] = ()
    step_number: int = 0
    atoms_created: Tuple[str, ...] = ()
    relations_created: Tuple[str, ...] = ()
    relations_removed: Tuple[str, ...] = ()
    description: str = ""
