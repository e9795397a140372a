# opening_balances/admin.py

from django.contrib import admin

from opening_balances.models import OpeningBalanceBatch, OpeningBalanceLine

# ============================================================
# OPENING BALANCE BATCHES
# Status changes go through the workflow service (posting + history),
# so the admin is a read-only window.
# ============================================================


class OpeningBalanceLineInline(admin.TabularInline):
    model = OpeningBalanceLine
    extra = 0
    can_delete = False
    fields = (
        "party_type",
        "party_id",
        "currency_code",
        "fx_rate_to_base",
        "debit_foreign",
        "credit_foreign",
        "debit_base",
        "credit_base",
        "notes",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(OpeningBalanceBatch)
class OpeningBalanceBatchAdmin(admin.ModelAdmin):
    list_display = (
        "batch_no",
        "opening_date",
        "status",
        "edit_request_status",
        "gl_journal",
        "created_by",
        "created_at",
    )
    list_filter = ("status", "edit_request_status")
    search_fields = ("batch_no", "notes")
    ordering = ("-opening_date", "-created_at")
    date_hierarchy = "opening_date"
    inlines = [OpeningBalanceLineInline]

    fieldsets = (
        ("Batch", {"fields": ("company_id", "batch_no", "opening_date", "notes")}),
        ("Status", {"fields": ("status", "gl_journal", "approved_by", "approved_at")}),
        (
            "Edit Request",
            {
                "fields": (
                    "edit_request_status",
                    "edit_requested_by",
                    "edit_requested_at",
                    "edit_request_reason",
                    "edit_approved_by",
                    "edit_approved_at",
                    "edit_rejection_reason",
                )
            },
        ),
        ("System Fields", {"fields": ("created_by", "created_at", "updated_by", "updated_at")}),
    )

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
