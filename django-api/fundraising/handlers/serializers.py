"""Serializers for request validation and for rendering domain models."""

from rest_framework import serializers

from fundraising.domain.filters import MAX_LIMIT, SORT_ORDERINGS
from fundraising.models import Donation as DonationRow
from fundraising.models import Donor as DonorRow
from fundraising.models import DonorActivity as DonorActivityRow


def _optional_cents(amount) -> int | None:
    return amount.cents if amount is not None else None


def _optional_id(entity_id) -> str | None:
    return str(entity_id) if entity_id is not None else None


# Requests


class CampaignCreateSerializer(serializers.Serializer):
    director_id = serializers.UUIDField()
    ensemble_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    goal_cents = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    per_student_goal_cents = serializers.IntegerField(
        min_value=0, required=False, allow_null=True, default=None
    )
    starts_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
    ends_at = serializers.DateTimeField(required=False, allow_null=True, default=None)


class ConfirmationMetadataSerializer(serializers.Serializer):
    campaign_id = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    participant_id = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )
    donor_name = serializers.CharField(required=False, allow_blank=True, default="")
    donor_email = serializers.CharField(required=False, allow_blank=True, default="")
    is_anonymous = serializers.BooleanField(required=False, default=False)
    message = serializers.CharField(required=False, allow_blank=True, default="")


class ConfirmationEventSerializer(serializers.Serializer):
    """A successful-payment notification. Metadata problems do not fail validation."""

    payment_ref = serializers.CharField(max_length=255)
    amount_cents = serializers.IntegerField(min_value=1)
    currency = serializers.CharField(max_length=10, required=False, default="usd")
    metadata = ConfirmationMetadataSerializer(required=False, default=dict)


class ManualDonationSerializer(serializers.Serializer):
    ensemble_id = serializers.UUIDField()
    amount_cents = serializers.IntegerField(min_value=1)
    payment_method = serializers.ChoiceField(
        choices=DonationRow.METHOD_CHOICES, default=DonationRow.METHOD_CASH
    )
    campaign_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    participant_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    donor_email = serializers.EmailField(required=False, allow_blank=True, default="")
    donor_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    organization_name = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    is_anonymous = serializers.BooleanField(required=False, default=False)
    message = serializers.CharField(required=False, allow_blank=True, default="")
    donated_at = serializers.DateTimeField(required=False, allow_null=True, default=None)


class MoveDonationSerializer(serializers.Serializer):
    participant_id = serializers.CharField()


class LinkDonorSerializer(serializers.Serializer):
    donor_id = serializers.CharField()


class DonorListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True, default="")
    tags = serializers.CharField(required=False, allow_blank=True, default="")
    min_lifetime_cents = serializers.IntegerField(min_value=0, required=False, default=None)
    max_lifetime_cents = serializers.IntegerField(min_value=0, required=False, default=None)
    last_donation_after = serializers.DateTimeField(required=False, default=None)
    last_donation_before = serializers.DateTimeField(required=False, default=None)
    sort = serializers.ChoiceField(choices=sorted(SORT_ORDERINGS), default="last_donation")
    limit = serializers.IntegerField(min_value=1, max_value=MAX_LIMIT, default=50)
    offset = serializers.IntegerField(min_value=0, default=0)

    def validate_tags(self, value: str) -> tuple[str, ...]:
        return tuple(tag.strip() for tag in value.split(",") if tag.strip())


class DonorUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    organization_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    address_line1 = serializers.CharField(required=False, allow_blank=True)
    address_line2 = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=50, required=False, allow_blank=True)
    postal_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=50, required=False)
    employer = serializers.CharField(max_length=255, required=False, allow_blank=True)
    preferred_contact_method = serializers.ChoiceField(
        choices=DonorRow.CONTACT_CHOICES, required=False
    )
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class ActivityCreateSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=DonorActivityRow.TYPE_CHOICES)
    summary = serializers.CharField()
    details = serializers.DictField(required=False, default=dict)
    related_id = serializers.UUIDField(required=False, allow_null=True, default=None)


# Responses


class CampaignSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    director_id = serializers.CharField(source="director_id.value")
    ensemble_id = serializers.SerializerMethodField()
    name = serializers.CharField()
    slug = serializers.CharField()
    description = serializers.CharField()
    goal_cents = serializers.SerializerMethodField()
    per_student_goal_cents = serializers.SerializerMethodField()
    starts_at = serializers.DateTimeField(allow_null=True)
    ends_at = serializers.DateTimeField(allow_null=True)
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()

    def get_ensemble_id(self, campaign) -> str | None:
        return _optional_id(campaign.ensemble_id)

    def get_goal_cents(self, campaign) -> int | None:
        return _optional_cents(campaign.goal)

    def get_per_student_goal_cents(self, campaign) -> int | None:
        return _optional_cents(campaign.per_student_goal)


class ParticipantSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    member_id = serializers.CharField(source="member_id.value")
    member_name = serializers.CharField()
    token = serializers.CharField()
    personal_goal_cents = serializers.SerializerMethodField()
    total_raised_cents = serializers.IntegerField(source="total_raised.cents")
    last_donation_at = serializers.DateTimeField(allow_null=True)

    def get_personal_goal_cents(self, participant) -> int | None:
        return _optional_cents(participant.personal_goal)


class CampaignDetailSerializer(serializers.Serializer):
    campaign = CampaignSerializer()
    participants = ParticipantSerializer(many=True)


class DonationSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    campaign_id = serializers.SerializerMethodField()
    participant_id = serializers.SerializerMethodField()
    ensemble_id = serializers.SerializerMethodField()
    donor_id = serializers.SerializerMethodField()
    payment_ref = serializers.CharField(allow_null=True)
    amount_cents = serializers.IntegerField(source="amount.cents")
    currency = serializers.CharField()
    donor_name = serializers.CharField()
    donor_email = serializers.CharField()
    is_anonymous = serializers.BooleanField()
    message = serializers.CharField()
    payment_method = serializers.CharField()
    donated_at = serializers.DateTimeField()

    def get_campaign_id(self, donation) -> str | None:
        return _optional_id(donation.campaign_id)

    def get_participant_id(self, donation) -> str | None:
        return _optional_id(donation.participant_id)

    def get_ensemble_id(self, donation) -> str | None:
        return _optional_id(donation.ensemble_id)

    def get_donor_id(self, donation) -> str | None:
        return _optional_id(donation.donor_id)


class DonorSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    ensemble_id = serializers.CharField(source="ensemble_id.value")
    display_name = serializers.CharField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    organization_name = serializers.CharField()
    email = serializers.CharField(allow_null=True)
    phone = serializers.CharField()
    address_line1 = serializers.CharField()
    address_line2 = serializers.CharField()
    city = serializers.CharField()
    state = serializers.CharField()
    postal_code = serializers.CharField()
    country = serializers.CharField()
    employer = serializers.CharField()
    preferred_contact_method = serializers.CharField()
    tags = serializers.ListField(child=serializers.CharField())
    notes = serializers.CharField()
    lifetime_total_cents = serializers.IntegerField(source="lifetime_total.cents")
    ytd_total_cents = serializers.IntegerField(source="ytd_total.cents")
    first_donation_at = serializers.DateTimeField(allow_null=True)
    last_donation_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()


class DonorActivitySerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    donor_id = serializers.CharField(source="donor_id.value")
    type = serializers.CharField()
    summary = serializers.CharField()
    details = serializers.DictField()
    related_id = serializers.UUIDField(allow_null=True)
    created_at = serializers.DateTimeField()


class DonorProfileSerializer(serializers.Serializer):
    donor = DonorSerializer()
    donations = DonationSerializer(many=True)
    activities = DonorActivitySerializer(many=True)
