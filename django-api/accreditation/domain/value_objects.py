"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from typing import Self
from uuid import UUID


def normalize_key(value: str | None) -> str:
    """Fold a category or rule match value into its comparison key."""
    if value is None:
        return ""
    return value.strip().casefold()


def normalize_organization(value: str | None) -> str:
    """Organizations are matched exactly; missing ones share the empty bucket."""
    if value is None:
        return ""
    return value.strip()


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RegistrationId:
    """Unique identifier for a Registration."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RuleId:
    """Unique identifier for a quota or zone rule."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing a quota ceiling."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")

    @classmethod
    def optional(cls, value: int | None) -> Self | None:
        """Build a capacity, keeping None as the unbounded sentinel."""
        if value is None:
            return None
        return cls(value=value)
