from django.contrib import admin

from clinic_core.documents.models import Document


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "owner", "history", "mime_type", "size", "created_at", "deleted_at")
    search_fields = ("name", "owner__email")
    list_filter = ("mime_type",)
    readonly_fields = ("path", "size", "mime_type")
    ordering = ("-created_at",)
