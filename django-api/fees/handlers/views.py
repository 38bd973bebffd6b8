"""HTTP handlers for member fees."""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from fees.handlers.serializers import (
    FeeAssignmentSerializer,
    FeeAssignSerializer,
    FeeDefinitionCreateSerializer,
    FeeDefinitionSerializer,
    FeePaymentCreateSerializer,
    MemberBalanceSerializer,
    MemberFeeSummarySerializer,
    PaymentOutcomeSerializer,
)
from fees.services import FeeService
from fees.stores.django_store import DjangoFeeStore
from roster.stores.django_store import DjangoRosterDirectory


def fee_service() -> FeeService:
    return FeeService(DjangoFeeStore(), DjangoRosterDirectory())


class FeeDefinitionListView(APIView):
    """Handler for GET/POST /api/ensembles/{ensemble_id}/fees"""

    def get(self, request: Request, ensemble_id: str) -> Response:
        definitions = fee_service().list_fee_definitions(ensemble_id)
        return Response({"fees": FeeDefinitionSerializer(definitions, many=True).data})

    def post(self, request: Request, ensemble_id: str) -> Response:
        serializer = FeeDefinitionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        definition = fee_service().create_fee_definition(ensemble_id, **serializer.validated_data)
        return Response(FeeDefinitionSerializer(definition).data, status=status.HTTP_201_CREATED)


class EnsembleFeeSummaryView(APIView):
    """Handler for GET /api/ensembles/{ensemble_id}/fees/summary"""

    def get(self, request: Request, ensemble_id: str) -> Response:
        balances = fee_service().ensemble_fee_summary(ensemble_id)
        return Response({"members": MemberBalanceSerializer(balances, many=True).data})


class FeeAssignmentListView(APIView):
    """Handler for POST /api/fees/{definition_id}/assignments"""

    def post(self, request: Request, definition_id: str) -> Response:
        serializer = FeeAssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignments = fee_service().assign_fee(definition_id, **serializer.validated_data)
        return Response(
            {"assignments": FeeAssignmentSerializer(assignments, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class FeePaymentListView(APIView):
    """Handler for POST /api/fee-assignments/{assignment_id}/payments

    Replaying a payment with the same provider_charge_id answers 200 with
    the original payment instead of 201.
    """

    def post(self, request: Request, assignment_id: str) -> Response:
        serializer = FeePaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        outcome = fee_service().record_manual_fee_payment(assignment_id, **serializer.validated_data)
        return Response(
            PaymentOutcomeSerializer(outcome).data,
            status=status.HTTP_200_OK if outcome.duplicate else status.HTTP_201_CREATED,
        )


class MemberFeesView(APIView):
    """Handler for GET /api/roster/{member_id}/fees"""

    def get(self, request: Request, member_id: str) -> Response:
        summary = fee_service().member_fees(member_id)
        return Response(MemberFeeSummarySerializer(summary).data)
