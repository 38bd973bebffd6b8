"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from typing import Self
from uuid import UUID

from core.domain.errors import InvalidIdError


@dataclass(frozen=True)
class EntityId:
    """UUID identifier. Subclass per entity so ids cannot be mixed up."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    @classmethod
    def parse(cls, value: object, field: str) -> Self:
        """Like ``from_string`` but raises a domain error naming the field."""
        if isinstance(value, UUID):
            return cls(value=value)
        try:
            return cls.from_string(str(value))
        except (TypeError, ValueError) as exc:
            raise InvalidIdError(field) from exc

    def __str__(self) -> str:
        return str(self.value)
