"""Domain layer — features and the graph model the store reads and writes.

This layer depends only on stdlib and pydantic.
It must never import from infrastructure or config.
"""

from graphstore.domain.features import FEATURE_FIELD_MAX, Feature
from graphstore.domain.graph import Graph, MutableGraph, Reconstructor, identity

__all__ = [
    "FEATURE_FIELD_MAX",
    "Feature",
    "Graph",
    "MutableGraph",
    "Reconstructor",
    "identity",
]
