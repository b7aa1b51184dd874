from django.contrib import admin

from clinic_core.specialists.models import Specialist


@admin.register(Specialist)
class SpecialistAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "specialty", "phone", "deleted_at")
    search_fields = ("specialty", "user__email", "user__name", "user__surnames")
    list_filter = ("specialty",)
    ordering = ("id",)
