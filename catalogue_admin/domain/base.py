"""Base classes for domain layer.

Provides the foundational abstractions shared by catalogue entities
and value objects.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, TypeVar


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. They have no lifecycle and are interchangeable
    when their values are equal.

    Example:
        @dataclass(frozen=True)
        class Money(ValueObject):
            amount_cents: int
            currency: str
    """

    pass


# ============================================================================
# Entity Base
# ============================================================================


T = TypeVar("T", bound=int | str | None)


@dataclass(eq=False)
class Entity(ABC, Generic[T]):
    """Base class for entities.

    Entities have identity that persists across state changes.
    Two entities are equal if they are of the same type with the same
    assigned identity. Entities that have not been persisted yet
    (``id is None``) are only equal to themselves.

    Subclasses must be declared with ``@dataclass(eq=False)`` so the
    identity comparison below is inherited instead of replaced by a
    field-wise one. Catalogue graphs may contain parent cycles, which a
    field-wise comparison would recurse into.

    Attributes:
        id: Unique identifier for this entity.
    """

    id: T

    def __eq__(self, other: object) -> bool:
        """Compare entities by identity.

        Args:
            other: Object to compare with.

        Returns:
            True if other is same type with same id.
        """
        if self is other:
            return True
        if not isinstance(other, self.__class__) or self.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash entity by identity.

        Returns:
            Hash of the entity type and id, or of the object itself
            while no id is assigned.
        """
        if self.id is None:
            return id(self)
        return hash((self.__class__.__name__, self.id))
