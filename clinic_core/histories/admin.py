from django.contrib import admin

from clinic_core.histories.models import MedicalHistory


@admin.register(MedicalHistory)
class MedicalHistoryAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "specialist", "created_at", "deleted_at")
    search_fields = ("patient__medical_record_number", "specialist__user__email")
    ordering = ("-created_at",)
