"""Donor service - the per-ensemble donor book and activity timeline."""

import logging
from uuid import UUID

from core.domain.errors import EnsembleNotFoundError, NothingToUpdateError
from fundraising.domain import (
    ActivityDraft,
    Donor,
    DonorActivity,
    DonorContact,
    DonorFilter,
    DonorId,
    DonorProfile,
)
from fundraising.domain.errors import DonorEmailRequiredError, DonorNotFoundError, InvalidChoiceError
from fundraising.domain.models import ACTIVITY_TYPES, DONOR_UPDATABLE_FIELDS
from fundraising.stores.interfaces import DonorStore
from roster.domain import EnsembleId
from roster.stores.interfaces import RosterDirectory

logger = logging.getLogger(__name__)

PROFILE_ACTIVITY_LIMIT = 50


class DonorService:
    """Service for donor records.

    Aggregates (lifetime, year-to-date, first/last donation) are derived
    from the donation ledger and cannot be edited here.
    """

    def __init__(self, store: DonorStore, roster: RosterDirectory) -> None:
        self._store = store
        self._roster = roster

    def find_or_create_donor(self, ensemble_id: EnsembleId, email: str, contact: DonorContact) -> Donor:
        """Return the ensemble's donor for ``email``, creating it on first sight.

        Runs inside the caller's unit of work when there is one.

        Raises:
            DonorEmailRequiredError: If the email is blank.
            DonorNameRequiredError: If no name or organization can be derived.
        """
        email = (email or "").strip()
        if not email:
            raise DonorEmailRequiredError()
        contact.require_name()
        return self._store.find_or_create_donor(ensemble_id, email, contact)

    def get_donor(self, donor_id: str) -> DonorProfile:
        parsed = DonorId.parse(donor_id, "donor_id")
        profile = self._store.get_profile(parsed, PROFILE_ACTIVITY_LIMIT)
        if profile is None:
            raise DonorNotFoundError(donor_id)
        return profile

    def list_donors(self, ensemble_id: str, donor_filter: DonorFilter) -> list[Donor]:
        parsed = EnsembleId.parse(ensemble_id, "ensemble_id")
        if not self._roster.ensemble_exists(parsed):
            raise EnsembleNotFoundError(ensemble_id)
        return self._store.list_donors(parsed, donor_filter)

    def update_donor(self, donor_id: str, changes: dict) -> Donor:
        parsed = DonorId.parse(donor_id, "donor_id")
        allowed = {name: value for name, value in changes.items() if name in DONOR_UPDATABLE_FIELDS}
        if not allowed:
            raise NothingToUpdateError()
        with self._store.unit_of_work("update_donor"):
            current = self._store.get_donor(parsed)
            if current is None:
                raise DonorNotFoundError(donor_id)
            names = {
                name: allowed.get(name, getattr(current, name))
                for name in ("first_name", "last_name", "organization_name")
            }
            DonorContact(**names).require_name()
            donor = self._store.update_donor(parsed, allowed)
        logger.info("Donor %s updated: %s", parsed, ", ".join(sorted(allowed)))
        return donor

    def log_activity(
        self,
        donor_id: str,
        activity_type: str,
        summary: str,
        details: dict | None = None,
        related_id: UUID | None = None,
    ) -> DonorActivity:
        parsed = DonorId.parse(donor_id, "donor_id")
        if activity_type not in ACTIVITY_TYPES:
            raise InvalidChoiceError("type", f"Unknown activity type '{activity_type}'")
        with self._store.unit_of_work("log_activity"):
            donor = self._store.get_donor(parsed)
            if donor is None:
                raise DonorNotFoundError(donor_id)
            return self._store.add_activity(
                ActivityDraft(
                    donor_id=parsed,
                    ensemble_id=donor.ensemble_id,
                    type=activity_type,
                    summary=summary,
                    details=details or {},
                    related_id=related_id,
                )
            )

    def find(self, donor_id: DonorId) -> Donor | None:
        return self._store.get_donor(donor_id)

    def record_activity(self, draft: ActivityDraft) -> DonorActivity:
        """Append an activity inside the caller's unit of work."""
        return self._store.add_activity(draft)

