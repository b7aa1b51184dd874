from django.contrib import admin

from clinic_core.patients.models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ("id", "medical_record_number", "user", "admission_date", "discharge_date", "deleted_at")
    search_fields = ("medical_record_number", "user__email", "user__name", "user__surnames")
    list_filter = ("admission_date",)
    ordering = ("id",)
