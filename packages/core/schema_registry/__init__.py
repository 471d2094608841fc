"""Schema relation graph for ReportQL - which tables join, and on which key."""

from .registry import (
    GraphSource,
    RelationEdge,
    RelationGraph,
    RelationGraphError,
    get_default_graph,
    load_relation_graph,
)

__all__ = [
    "GraphSource",
    "RelationEdge",
    "RelationGraph",
    "RelationGraphError",
    "get_default_graph",
    "load_relation_graph",
]
