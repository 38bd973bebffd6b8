"""Read-side view of roster members as the ledger sees them."""

from dataclasses import dataclass

from core.domain.value_objects import EntityId


class EnsembleId(EntityId):
    """Unique identifier for an Ensemble."""


class DirectorId(EntityId):
    """Unique identifier for a Director."""


class MemberId(EntityId):
    """Unique identifier for a RosterMember."""


@dataclass(frozen=True)
class Member:
    id: MemberId
    ensemble_id: EnsembleId
    first_name: str
    last_name: str
    email: str

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
