from fundraising.handlers.views import (
    CampaignDetailView,
    CampaignListView,
    DonationDonorView,
    DonationMoveView,
    DonorActivityListView,
    DonorDetailView,
    DonorListView,
    ManualDonationView,
    ParticipantSeedView,
    PaymentConfirmationView,
)

__all__ = [
    "CampaignListView",
    "CampaignDetailView",
    "ParticipantSeedView",
    "PaymentConfirmationView",
    "ManualDonationView",
    "DonationMoveView",
    "DonationDonorView",
    "DonorListView",
    "DonorDetailView",
    "DonorActivityListView",
]
