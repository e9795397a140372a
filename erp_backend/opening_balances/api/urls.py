# opening_balances/api/urls.py

from django.urls import path

from opening_balances.api.views import (
    ApproveBatchView,
    BatchHistoryView,
    BatchJournalEntriesView,
    CancelBatchView,
    DecideEditRequestView,
    ExchangeRateLookupView,
    OpeningBalanceBatchDetailView,
    OpeningBalanceBatchListCreateView,
    RejectBatchView,
    RequestEditView,
    SubmitBatchView,
)
from parties.api.views import CustomerSearchView, VendorSearchView

urlpatterns = [
    path("batches/", OpeningBalanceBatchListCreateView.as_view(), name="ob-batch-list"),
    path("batches/<int:pk>/", OpeningBalanceBatchDetailView.as_view(), name="ob-batch-detail"),
    path("batches/<int:pk>/submit/", SubmitBatchView.as_view(), name="ob-batch-submit"),
    path("batches/<int:pk>/approve/", ApproveBatchView.as_view(), name="ob-batch-approve"),
    path("batches/<int:pk>/reject/", RejectBatchView.as_view(), name="ob-batch-reject"),
    path("batches/<int:pk>/cancel/", CancelBatchView.as_view(), name="ob-batch-cancel"),
    path(
        "batches/<int:pk>/request-edit/",
        RequestEditView.as_view(),
        name="ob-batch-request-edit",
    ),
    path(
        "batches/<int:pk>/decide-edit-request/",
        DecideEditRequestView.as_view(),
        name="ob-batch-decide-edit-request",
    ),
    path("batches/<int:pk>/history/", BatchHistoryView.as_view(), name="ob-batch-history"),
    path(
        "batches/<int:pk>/journal-entries/",
        BatchJournalEntriesView.as_view(),
        name="ob-batch-journal-entries",
    ),
    # Lookups for the line editor
    path("customers/search/", CustomerSearchView.as_view(), name="ob-customer-search"),
    path("vendors/search/", VendorSearchView.as_view(), name="ob-vendor-search"),
    path("exchange-rate/", ExchangeRateLookupView.as_view(), name="ob-exchange-rate"),
]
