"""Catalog of the predefined initial configurations the service ships with."""

from .clients.messages import PredefinedExampleInfo


PREDEFINED_EXAMPLES = (
    PredefinedExampleInfo(
        name="empty_graph",
        description="Empty hypergraph for custom simulations",
        atom_count=0,
        relation_count=0,
    ),
    PredefinedExampleInfo(
        name="single_edge",
        description="Simple A--B edge for edge splitting demos",
        atom_count=2,
        relation_count=1,
    ),
    PredefinedExampleInfo(
        name="triangle",
        description="Three atoms in triangular cycle (A--B--C--A)",
        atom_count=3,
        relation_count=3,
    ),
    PredefinedExampleInfo(
        name="small_path",
        description="Linear path A--B--C--D",
        atom_count=4,
        relation_count=3,
    ),
    PredefinedExampleInfo(
        name="small_cycle",
        description="Four-atom cycle A--B--C--D--A",
        atom_count=4,
        relation_count=4,
    ),
)
