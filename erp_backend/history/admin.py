# history/admin.py

from django.contrib import admin

from history.models import HistoryEntry


@admin.register(HistoryEntry)
class HistoryEntryAdmin(admin.ModelAdmin):
    list_display = ("module", "module_id", "action", "user", "created_at")
    list_filter = ("module", "action")
    search_fields = ("module_id", "action")
    ordering = ("-created_at",)
    readonly_fields = ("module", "module_id", "user", "action", "details", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
