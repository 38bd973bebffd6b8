from django.urls import path

from fees.handlers import (
    EnsembleFeeSummaryView,
    FeeAssignmentListView,
    FeeDefinitionListView,
    FeePaymentListView,
    MemberFeesView,
)

urlpatterns = [
    path(
        "ensembles/<str:ensemble_id>/fees",
        FeeDefinitionListView.as_view(),
        name="fee-definition-list",
    ),
    path(
        "ensembles/<str:ensemble_id>/fees/summary",
        EnsembleFeeSummaryView.as_view(),
        name="ensemble-fee-summary",
    ),
    path(
        "fees/<str:definition_id>/assignments",
        FeeAssignmentListView.as_view(),
        name="fee-assignment-list",
    ),
    path(
        "fee-assignments/<str:assignment_id>/payments",
        FeePaymentListView.as_view(),
        name="fee-payment-list",
    ),
    path("roster/<str:member_id>/fees", MemberFeesView.as_view(), name="member-fees"),
]
