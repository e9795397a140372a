# parties/admin.py

from django.contrib import admin

from parties.models import Party


@admin.register(Party)
class PartyAdmin(admin.ModelAdmin):
    list_display = ("display_name", "party_type", "currency_code", "email", "is_active")
    list_filter = ("party_type", "is_active")
    search_fields = ("display_name", "email", "phone")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("display_name",)
