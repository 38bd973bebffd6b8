"""Campaign service - campaigns and their enrolled participants."""

import logging
from dataclasses import dataclass
from datetime import datetime

from core.domain.errors import (
    DirectorNotFoundError,
    EnsembleNotFoundError,
    InvalidAmountError,
    MissingFieldError,
)
from core.domain.money import Money
from fundraising.domain import Campaign, CampaignDetail, CampaignDraft, CampaignId
from fundraising.domain.errors import CampaignNotFoundError, InvalidWindowError
from fundraising.stores.interfaces import CampaignStore
from roster.domain import DirectorId, EnsembleId
from roster.stores.interfaces import RosterDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CampaignRequest:
    director_id: str
    name: str
    ensemble_id: str | None = None
    description: str = ""
    goal_cents: int | None = None
    per_student_goal_cents: int | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None


class CampaignService:
    """Service for creating campaigns and enrolling roster members."""

    def __init__(self, store: CampaignStore, roster: RosterDirectory) -> None:
        self._store = store
        self._roster = roster

    def create_campaign(self, request: CampaignRequest) -> CampaignDetail:
        """Create a campaign and enroll every active member of its ensemble.

        Slug allocation and seeding happen in one unit of work; a failure
        leaves no campaign behind.

        Raises:
            InvalidIdError: If an id is not a valid UUID.
            MissingFieldError: If the name is blank.
            InvalidAmountError: If a goal is negative.
            InvalidWindowError: If the campaign ends before it starts.
            DirectorNotFoundError: If the director does not exist.
            EnsembleNotFoundError: If the ensemble does not exist or is not
                owned by the director.
            CodeExhaustedError: If no free slug or token could be allocated.
        """
        director_id = DirectorId.parse(request.director_id, "director_id")
        ensemble_id = (
            EnsembleId.parse(request.ensemble_id, "ensemble_id") if request.ensemble_id else None
        )
        name = (request.name or "").strip()
        if not name:
            raise MissingFieldError("name")
        goal = self._goal(request.goal_cents, "goal_cents")
        per_student_goal = self._goal(request.per_student_goal_cents, "per_student_goal_cents")
        if request.starts_at and request.ends_at and request.ends_at < request.starts_at:
            raise InvalidWindowError()

        with self._store.unit_of_work("create_campaign"):
            if not self._roster.director_exists(director_id):
                raise DirectorNotFoundError(str(director_id))
            if ensemble_id is not None and not self._roster.is_director_of(director_id, ensemble_id):
                raise EnsembleNotFoundError(str(ensemble_id))
            campaign = self._store.insert_campaign(
                CampaignDraft(
                    director_id=director_id,
                    ensemble_id=ensemble_id,
                    name=name,
                    description=request.description,
                    goal=goal,
                    per_student_goal=per_student_goal,
                    starts_at=request.starts_at,
                    ends_at=request.ends_at,
                )
            )
            seeded = self._seed(campaign)

        logger.info(
            "Campaign %s created with slug %s, %d participant(s) seeded",
            campaign.id,
            campaign.slug,
            seeded,
        )
        return CampaignDetail(campaign=campaign, participants=tuple(self._store.get_participants(campaign.id)))

    def seed_participants(self, campaign_id: str) -> tuple[CampaignDetail, int]:
        """Enroll active members who joined since the last run. Idempotent."""
        parsed = CampaignId.parse(campaign_id, "campaign_id")
        with self._store.unit_of_work("seed_participants"):
            campaign = self._store.get_campaign(parsed)
            if campaign is None:
                raise CampaignNotFoundError(campaign_id)
            seeded = self._seed(campaign)
        logger.info("Campaign %s reseeded, %d new participant(s)", parsed, seeded)
        detail = CampaignDetail(campaign=campaign, participants=tuple(self._store.get_participants(parsed)))
        return detail, seeded

    def get_campaign(self, campaign_id: str) -> CampaignDetail:
        parsed = CampaignId.parse(campaign_id, "campaign_id")
        campaign = self._store.get_campaign(parsed)
        if campaign is None:
            raise CampaignNotFoundError(campaign_id)
        return CampaignDetail(campaign=campaign, participants=tuple(self._store.get_participants(parsed)))

    def _seed(self, campaign: Campaign) -> int:
        if campaign.ensemble_id is None:
            return 0
        return self._store.seed_participants(campaign, self._roster.active_members(campaign.ensemble_id))

    @staticmethod
    def _goal(cents: int | None, field: str) -> Money | None:
        if cents is None:
            return None
        if cents < 0:
            raise InvalidAmountError(field, "Goal cannot be negative")
        return Money(cents)
