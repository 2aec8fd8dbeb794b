"""Graph model: adjacency wrapping, transition operator, and graph file IO."""

from cwk.graph.builder import build_graph, transition_matrix, validate_adjacency
from cwk.graph.io import load_adjacency, load_labels, save_adjacency, save_labels
from cwk.graph.types import GraphModel

__all__ = [
    "GraphModel",
    "build_graph",
    "load_adjacency",
    "load_labels",
    "save_adjacency",
    "save_labels",
    "transition_matrix",
    "validate_adjacency",
]
