"""Feature — a name/value tag attached to a graph, node, or edge."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Width of the feature_name / feature_value columns.
FEATURE_FIELD_MAX = 256


class Feature(BaseModel):
    """Immutable, hashable ``(name, value)`` pair.

    Several features may share a name on one owner (multi-valued tag);
    an owner's features form a set, so identical pairs collapse.
    """

    model_config = {"frozen": True}

    name: str = Field(max_length=FEATURE_FIELD_MAX)
    value: str = Field(max_length=FEATURE_FIELD_MAX)

    @classmethod
    def of(cls, name: str, value: str) -> Feature:
        """Shortcut for ``Feature(name=name, value=value)``."""
        return cls(name=name, value=value)

    @classmethod
    def coerce(cls, raw: Any) -> Feature:
        """Accept a Feature or a ``(name, value)`` pair.

        Raises:
            TypeError: *raw* is a string or not a two-item pair.
        """
        if isinstance(raw, Feature):
            return raw
        msg = f"Expected a Feature or (name, value) pair, got {raw!r}"
        if isinstance(raw, str | bytes):
            raise TypeError(msg)
        try:
            name, value = raw
        except (TypeError, ValueError) as exc:
            raise TypeError(msg) from exc
        return cls(name=name, value=value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Feature):
            return NotImplemented
        return (self.name, self.value) < (other.name, other.value)

    def __repr__(self) -> str:
        return f"Feature({self.name!r}, {self.value!r})"
