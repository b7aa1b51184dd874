from django.contrib import admin

from clinic_core.appointments.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "specialist", "scheduled_at", "type", "status", "is_first_visit")
    list_filter = ("status", "type", "is_first_visit")
    search_fields = ("patient__medical_record_number", "specialist__user__email")
    ordering = ("-scheduled_at",)
