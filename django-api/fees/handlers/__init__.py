from fees.handlers.views import (
    EnsembleFeeSummaryView,
    FeeAssignmentListView,
    FeeDefinitionListView,
    FeePaymentListView,
    MemberFeesView,
)

__all__ = [
    "EnsembleFeeSummaryView",
    "FeeDefinitionListView",
    "FeeAssignmentListView",
    "FeePaymentListView",
    "MemberFeesView",
]
