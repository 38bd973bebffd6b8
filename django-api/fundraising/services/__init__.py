from fundraising.services.campaign_service import CampaignRequest, CampaignService
from fundraising.services.donation_service import DonationService, ManualDonationRequest
from fundraising.services.donor_service import DonorService
from fundraising.services.payment_service import PaymentConfirmationProcessor

__all__ = [
    "CampaignRequest",
    "CampaignService",
    "DonationService",
    "DonorService",
    "ManualDonationRequest",
    "PaymentConfirmationProcessor",
]
