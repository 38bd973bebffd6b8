from django.urls import path

from fundraising.handlers import (
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

urlpatterns = [
    path("campaigns", CampaignListView.as_view(), name="campaign-list"),
    path("campaigns/<str:campaign_id>", CampaignDetailView.as_view(), name="campaign-detail"),
    path(
        "campaigns/<str:campaign_id>/participants/seed",
        ParticipantSeedView.as_view(),
        name="participant-seed",
    ),
    path(
        "payments/confirmations",
        PaymentConfirmationView.as_view(),
        name="payment-confirmation",
    ),
    path("donations/manual", ManualDonationView.as_view(), name="donation-manual"),
    path("donations/<str:donation_id>/move", DonationMoveView.as_view(), name="donation-move"),
    path("donations/<str:donation_id>/donor", DonationDonorView.as_view(), name="donation-donor"),
    path("ensembles/<str:ensemble_id>/donors", DonorListView.as_view(), name="donor-list"),
    path("donors/<str:donor_id>", DonorDetailView.as_view(), name="donor-detail"),
    path(
        "donors/<str:donor_id>/activities",
        DonorActivityListView.as_view(),
        name="donor-activity-list",
    ),
]
