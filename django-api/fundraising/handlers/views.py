"""HTTP handlers for campaigns, donations and donors.

Handlers parse and validate requests, call services and render domain
models. Domain errors are mapped to HTTP responses by
core.handlers.exceptions.
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.notifications import send_receipt_on_commit
from fundraising.domain import ConfirmationEvent, Donation, DonorFilter
from fundraising.handlers.serializers import (
    ActivityCreateSerializer,
    CampaignCreateSerializer,
    CampaignDetailSerializer,
    ConfirmationEventSerializer,
    DonationSerializer,
    DonorActivitySerializer,
    DonorListQuerySerializer,
    DonorProfileSerializer,
    DonorSerializer,
    DonorUpdateSerializer,
    LinkDonorSerializer,
    ManualDonationSerializer,
    MoveDonationSerializer,
    ParticipantSerializer,
)
from fundraising.services import (
    CampaignRequest,
    CampaignService,
    DonationService,
    DonorService,
    ManualDonationRequest,
    PaymentConfirmationProcessor,
)
from fundraising.stores.django_store import DjangoCampaignStore, DjangoDonorStore
from roster.stores.django_store import DjangoRosterDirectory


def send_donation_receipt(donation: Donation) -> None:
    send_receipt_on_commit(
        donation.donor_email,
        "Thank you for your donation",
        f"Thank you {donation.donor_name or 'for your support'}! "
        f"We received your donation of {donation.amount}.",
    )


def campaign_service() -> CampaignService:
    return CampaignService(DjangoCampaignStore(), DjangoRosterDirectory())


def donor_service() -> DonorService:
    return DonorService(DjangoDonorStore(), DjangoRosterDirectory())


def donation_service() -> DonationService:
    return DonationService(DjangoCampaignStore(), donor_service(), DjangoRosterDirectory())


def confirmation_processor() -> PaymentConfirmationProcessor:
    return PaymentConfirmationProcessor(
        DjangoCampaignStore(),
        donor_service(),
        on_donation_recorded=send_donation_receipt,
    )


def _optional_str(value) -> str | None:
    return str(value) if value else None


class CampaignListView(APIView):
    """Handler for POST /api/campaigns"""

    def post(self, request: Request) -> Response:
        serializer = CampaignCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        detail = campaign_service().create_campaign(
            CampaignRequest(
                director_id=str(data["director_id"]),
                ensemble_id=_optional_str(data["ensemble_id"]),
                name=data["name"],
                description=data["description"],
                goal_cents=data["goal_cents"],
                per_student_goal_cents=data["per_student_goal_cents"],
                starts_at=data["starts_at"],
                ends_at=data["ends_at"],
            )
        )
        return Response(CampaignDetailSerializer(detail).data, status=status.HTTP_201_CREATED)


class CampaignDetailView(APIView):
    """Handler for GET /api/campaigns/{campaign_id}"""

    def get(self, request: Request, campaign_id: str) -> Response:
        detail = campaign_service().get_campaign(campaign_id)
        return Response(CampaignDetailSerializer(detail).data)


class ParticipantSeedView(APIView):
    """Handler for POST /api/campaigns/{campaign_id}/participants/seed"""

    def post(self, request: Request, campaign_id: str) -> Response:
        detail, seeded = campaign_service().seed_participants(campaign_id)
        return Response(
            {
                "seeded": seeded,
                "participants": ParticipantSerializer(detail.participants, many=True).data,
            }
        )


class PaymentConfirmationView(APIView):
    """Handler for POST /api/payments/confirmations

    Answers 200 for recorded, duplicate and unreconciled payments so the
    payment processor stops redelivering.
    """

    def post(self, request: Request) -> Response:
        serializer = ConfirmationEventSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        metadata = data.get("metadata") or {}
        result = confirmation_processor().process(
            ConfirmationEvent(
                payment_ref=data["payment_ref"],
                amount_cents=data["amount_cents"],
                currency=data["currency"],
                campaign_id=metadata.get("campaign_id"),
                participant_id=metadata.get("participant_id"),
                donor_name=metadata.get("donor_name", ""),
                donor_email=metadata.get("donor_email", ""),
                is_anonymous=metadata.get("is_anonymous", False),
                message=metadata.get("message", ""),
                payload=dict(request.data),
            )
        )
        body = {
            "status": result.status.value,
            "donation_id": _optional_str(result.donation_id),
        }
        if result.warning is not None:
            body["warning"] = {
                "code": result.warning.code.value,
                "payment_ref": result.warning.payment_ref,
                "reason": result.warning.reason,
            }
        return Response(body)


class ManualDonationView(APIView):
    """Handler for POST /api/donations/manual"""

    def post(self, request: Request) -> Response:
        serializer = ManualDonationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        donation = donation_service().record_manual_donation(
            ManualDonationRequest(
                ensemble_id=str(data["ensemble_id"]),
                amount_cents=data["amount_cents"],
                payment_method=data["payment_method"],
                campaign_id=_optional_str(data["campaign_id"]),
                participant_id=_optional_str(data["participant_id"]),
                donor_email=data["donor_email"],
                donor_name=data["donor_name"],
                organization_name=data["organization_name"],
                is_anonymous=data["is_anonymous"],
                message=data["message"],
                donated_at=data["donated_at"],
            )
        )
        return Response(DonationSerializer(donation).data, status=status.HTTP_201_CREATED)


class DonationMoveView(APIView):
    """Handler for POST /api/donations/{donation_id}/move"""

    def post(self, request: Request, donation_id: str) -> Response:
        serializer = MoveDonationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        donation, participants = donation_service().move_donation(
            donation_id, serializer.validated_data["participant_id"]
        )
        return Response(
            {
                "donation": DonationSerializer(donation).data,
                "participants": ParticipantSerializer(participants, many=True).data,
            }
        )


class DonationDonorView(APIView):
    """Handler for POST /api/donations/{donation_id}/donor"""

    def post(self, request: Request, donation_id: str) -> Response:
        serializer = LinkDonorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        donation = donation_service().link_donor(donation_id, serializer.validated_data["donor_id"])
        return Response(DonationSerializer(donation).data)


class DonorListView(APIView):
    """Handler for GET /api/ensembles/{ensemble_id}/donors"""

    def get(self, request: Request, ensemble_id: str) -> Response:
        serializer = DonorListQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        donors = donor_service().list_donors(ensemble_id, DonorFilter(**serializer.validated_data))
        return Response({"donors": DonorSerializer(donors, many=True).data})


class DonorDetailView(APIView):
    """Handler for GET/PATCH /api/donors/{donor_id}"""

    def get(self, request: Request, donor_id: str) -> Response:
        profile = donor_service().get_donor(donor_id)
        return Response(DonorProfileSerializer(profile).data)

    def patch(self, request: Request, donor_id: str) -> Response:
        serializer = DonorUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        donor = donor_service().update_donor(donor_id, dict(serializer.validated_data))
        return Response(DonorSerializer(donor).data)


class DonorActivityListView(APIView):
    """Handler for POST /api/donors/{donor_id}/activities"""

    def post(self, request: Request, donor_id: str) -> Response:
        serializer = ActivityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        activity = donor_service().log_activity(
            donor_id,
            data["type"],
            data["summary"],
            details=data["details"],
            related_id=data["related_id"],
        )
        return Response(DonorActivitySerializer(activity).data, status=status.HTTP_201_CREATED)
