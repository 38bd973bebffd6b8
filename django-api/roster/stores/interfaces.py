"""Roster lookups consumed by the ledger apps."""

from abc import ABC, abstractmethod

from roster.domain import DirectorId, EnsembleId, Member, MemberId


class RosterDirectory(ABC):
    @abstractmethod
    def director_exists(self, director_id: DirectorId) -> bool:
        ...

    @abstractmethod
    def ensemble_exists(self, ensemble_id: EnsembleId) -> bool:
        ...

    @abstractmethod
    def is_director_of(self, director_id: DirectorId, ensemble_id: EnsembleId) -> bool:
        """Check that the director owns the ensemble."""
        ...

    @abstractmethod
    def active_members(self, ensemble_id: EnsembleId) -> list[Member]:
        """Return active members of an ensemble ordered by last name."""
        ...

    @abstractmethod
    def members(self, ensemble_id: EnsembleId) -> list[Member]:
        """Return every member of an ensemble, active or not, ordered by last name."""
        ...

    @abstractmethod
    def get_member(self, member_id: MemberId) -> Member | None:
        ...
