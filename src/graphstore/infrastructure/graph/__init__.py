"""NetworkX conversions for stored graphs."""

from graphstore.infrastructure.graph.convert import (
    from_networkx,
    to_frozen_networkx,
    to_networkx,
)

__all__ = ["from_networkx", "to_frozen_networkx", "to_networkx"]
