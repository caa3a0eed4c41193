"""Repositories — SQL for each store concern, run on a caller-owned executor."""

from graphstore.infrastructure.repositories.lifecycle import LifecycleRepository
from graphstore.infrastructure.repositories.reader import GraphReader
from graphstore.infrastructure.repositories.search import FeatureSearch
from graphstore.infrastructure.repositories.writer import GraphWriter

__all__ = ["FeatureSearch", "GraphReader", "GraphWriter", "LifecycleRepository"]
