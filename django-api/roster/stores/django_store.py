"""Django ORM implementation of the RosterDirectory."""

from roster import models
from roster.domain import DirectorId, EnsembleId, Member, MemberId
from roster.stores.interfaces import RosterDirectory


def to_member(row: models.RosterMember) -> Member:
    return Member(
        id=MemberId(row.id),
        ensemble_id=EnsembleId(row.ensemble_id),
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
    )


class DjangoRosterDirectory(RosterDirectory):
    def director_exists(self, director_id: DirectorId) -> bool:
        return models.Director.objects.filter(pk=director_id.value).exists()

    def ensemble_exists(self, ensemble_id: EnsembleId) -> bool:
        return models.Ensemble.objects.filter(pk=ensemble_id.value).exists()

    def is_director_of(self, director_id: DirectorId, ensemble_id: EnsembleId) -> bool:
        return models.Ensemble.objects.filter(
            pk=ensemble_id.value, director_id=director_id.value
        ).exists()

    def active_members(self, ensemble_id: EnsembleId) -> list[Member]:
        rows = models.RosterMember.objects.filter(
            ensemble_id=ensemble_id.value, status=models.RosterMember.STATUS_ACTIVE
        )
        return [to_member(row) for row in rows]

    def members(self, ensemble_id: EnsembleId) -> list[Member]:
        return [to_member(row) for row in models.RosterMember.objects.filter(ensemble_id=ensemble_id.value)]

    def get_member(self, member_id: MemberId) -> Member | None:
        row = models.RosterMember.objects.filter(pk=member_id.value).first()
        return to_member(row) if row else None
