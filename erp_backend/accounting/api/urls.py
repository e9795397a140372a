# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from accounting.api.view import JournalEntryViewSet, JournalLineViewSet
from accounting.api.views.accounts import ActiveChartAccountsView

router = DefaultRouter()
router.register("journal-entries", JournalEntryViewSet, basename="journal-entry")
router.register("journal-lines", JournalLineViewSet, basename="journal-line")

urlpatterns = [
    path("", include(router.urls)),
    path("accounts/", ActiveChartAccountsView.as_view(), name="accounts"),
]
