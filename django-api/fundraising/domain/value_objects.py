"""Identifiers for the fundraising domain."""

from core.domain.value_objects import EntityId


class CampaignId(EntityId):
    """Unique identifier for a Campaign."""


class ParticipantId(EntityId):
    """Unique identifier for a CampaignParticipant."""


class DonationId(EntityId):
    """Unique identifier for a Donation."""


class DonorId(EntityId):
    """Unique identifier for a Donor."""


class ActivityId(EntityId):
    """Unique identifier for a DonorActivity."""
