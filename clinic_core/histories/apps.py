from django.apps import AppConfig


class HistoriesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "clinic_core.histories"
