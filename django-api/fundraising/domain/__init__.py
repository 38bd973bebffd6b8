from fundraising.domain.filters import DonorFilter, Predicate
from fundraising.domain.models import (
    ActivityDraft,
    Campaign,
    CampaignDetail,
    CampaignDraft,
    ConfirmationEvent,
    ConfirmationResult,
    ConfirmationStatus,
    Donation,
    DonationDraft,
    Donor,
    DonorActivity,
    DonorContact,
    DonorProfile,
    Participant,
)
from fundraising.domain.value_objects import (
    ActivityId,
    CampaignId,
    DonationId,
    DonorId,
    ParticipantId,
)

__all__ = [
    "ActivityDraft",
    "ActivityId",
    "Campaign",
    "CampaignDetail",
    "CampaignDraft",
    "CampaignId",
    "ConfirmationEvent",
    "ConfirmationResult",
    "ConfirmationStatus",
    "Donation",
    "DonationDraft",
    "DonationId",
    "Donor",
    "DonorActivity",
    "DonorContact",
    "DonorFilter",
    "DonorId",
    "DonorProfile",
    "Participant",
    "ParticipantId",
    "Predicate",
]
