"""
Component base class for validated data containers.

Components hold state, validate it on construction and on every
assignment, and deep-copy cleanly. Game rules that mutate them live on
the owning aggregate (or on the component itself when the rule only
touches its own fields).

Usage:
    class Pool(Component):
        current: int = 10
        maximum: int = 10
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ConfigDict

C = TypeVar('C', bound='Component')


class Component(BaseModel):
    """
    Base class for all components.

    Pydantic gives us:
    - Validation on init and on assignment
    - JSON-ready dumps for external snapshotting
    - Deep copies via ``clone``
    """

    model_config = ConfigDict(
        # Allow plain classes (TypeTag, enums) as field types
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra='forbid',
    )

    def clone(self: C) -> C:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)
