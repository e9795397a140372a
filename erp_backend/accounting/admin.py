# accounting/admin.py
"""
Admin for chart, currencies and the GL.

Charts, accounts and currencies are maintained here. Journals and their
lines are written only by the journal engine, so both are view-only.
"""

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.chart import ChartOfAccounts
from accounting.models.currency import Currency, ExchangeRate
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine


class ViewOnlyAdminMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class AccountInline(admin.TabularInline):
    model = Account
    extra = 0
    fields = ("code", "name", "account_type", "is_active")
    ordering = ("code",)
    show_change_link = True


@admin.register(ChartOfAccounts)
class ChartOfAccountsAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "business_type", "is_active", "updated_at")
    list_filter = ("business_type", "is_active")
    search_fields = ("code", "name")
    readonly_fields = ("created_at", "updated_at")
    inlines = [AccountInline]


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "account_type", "normal_side", "chart", "is_active")
    list_filter = ("chart", "account_type", "is_active")
    search_fields = ("code", "name")
    ordering = ("chart", "code")
    readonly_fields = ("normal_side", "created_at", "updated_at")

    @admin.display(description="Normal side")
    def normal_side(self, obj):
        return obj.normal_side


class ExchangeRateInline(admin.TabularInline):
    model = ExchangeRate
    extra = 0
    fields = ("effective_from", "rate_to_base")
    ordering = ("-effective_from",)


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "conversion_rate", "is_active")
    list_filter = ("is_active",)
    search_fields = ("code", "name")
    inlines = [ExchangeRateInline]


JOURNAL_LINE_FIELDS = (
    "line_no",
    "account",
    "debit",
    "credit",
    "description",
    "entity_type",
    "entity_id",
)


class JournalLineInline(ViewOnlyAdminMixin, admin.TabularInline):
    model = JournalLine
    extra = 0
    fields = JOURNAL_LINE_FIELDS
    readonly_fields = JOURNAL_LINE_FIELDS


@admin.register(JournalEntry)
class JournalEntryAdmin(ViewOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "journal_number",
        "journal_date",
        "source_type",
        "source_id",
        "total_amount",
        "is_deleted",
    )
    list_filter = ("source_type", "is_deleted")
    search_fields = ("journal_number", "source_id", "source_name", "memo")
    date_hierarchy = "journal_date"
    inlines = [JournalLineInline]


@admin.register(JournalLine)
class JournalLineAdmin(ViewOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("journal", *JOURNAL_LINE_FIELDS[:5])
    list_filter = ("entity_type",)
    search_fields = ("journal__journal_number", "account__code", "entity_id")
    ordering = ("journal", "line_no")
