"""Serializers for fee requests and responses."""

from rest_framework import serializers


class FeeDefinitionCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    amount_cents = serializers.IntegerField(min_value=0)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    default_due_date = serializers.DateField(required=False, allow_null=True, default=None)


class FeeAssignSerializer(serializers.Serializer):
    member_ids = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    amount_cents = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    due_date = serializers.DateField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class FeePaymentCreateSerializer(serializers.Serializer):
    amount_cents = serializers.IntegerField(min_value=1)
    provider = serializers.CharField(max_length=50, required=False, default="offline")
    provider_charge_id = serializers.CharField(
        max_length=255, required=False, allow_null=True, default=None
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class FeeDefinitionSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    ensemble_id = serializers.CharField(source="ensemble_id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    amount_cents = serializers.IntegerField(source="amount.cents")
    default_due_date = serializers.DateField(allow_null=True)
    active = serializers.BooleanField()


class FeeAssignmentSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    definition_id = serializers.CharField(source="definition_id.value")
    member_id = serializers.CharField(source="member_id.value")
    amount_cents = serializers.IntegerField(source="amount.cents")
    discount_cents = serializers.IntegerField(source="discount.cents")
    net_cents = serializers.IntegerField(source="net.cents")
    status = serializers.CharField()
    due_date = serializers.DateField(allow_null=True)
    notes = serializers.CharField()


class FeePaymentSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    assignment_id = serializers.CharField(source="assignment_id.value")
    amount_cents = serializers.IntegerField(source="amount.cents")
    provider = serializers.CharField()
    provider_charge_id = serializers.CharField(allow_null=True)
    notes = serializers.CharField()
    paid_at = serializers.DateTimeField()


class PaymentOutcomeSerializer(serializers.Serializer):
    payment = FeePaymentSerializer()
    assignment = FeeAssignmentSerializer()
    duplicate = serializers.BooleanField()


class MemberFeeLineSerializer(serializers.Serializer):
    assignment = FeeAssignmentSerializer()
    fee_name = serializers.CharField()
    paid_cents = serializers.IntegerField(source="paid.cents")
    balance_cents = serializers.IntegerField()


class MemberFeeSummarySerializer(serializers.Serializer):
    member_id = serializers.CharField(source="member_id.value")
    lines = MemberFeeLineSerializer(many=True)
    total_assigned_cents = serializers.IntegerField(source="total_assigned.cents")
    total_paid_cents = serializers.IntegerField(source="total_paid.cents")
    total_balance_cents = serializers.IntegerField()


class MemberBalanceSerializer(serializers.Serializer):
    member_id = serializers.CharField(source="member.id.value")
    first_name = serializers.CharField(source="member.first_name")
    last_name = serializers.CharField(source="member.last_name")
    owed_cents = serializers.IntegerField(source="owed.cents")
    paid_cents = serializers.IntegerField(source="paid.cents")
    balance_cents = serializers.IntegerField()
