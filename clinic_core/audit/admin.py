# backend/clinic_core/audit/admin.py
from django.contrib import admin

from clinic_core.audit.models import AuditEntry


@admin.register(AuditEntry)
class AuditEntryAdmin(admin.ModelAdmin):
    list_display = ("action", "actor_user", "affected_table", "record_id", "occurred_at")
    list_filter = ("action", "affected_table")
    search_fields = ("action", "description", "record_id")
    readonly_fields = ("actor_user", "action", "description", "affected_table", "record_id", "occurred_at")
    ordering = ("-occurred_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
