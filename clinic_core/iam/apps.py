# backend/clinic_core/iam/apps.py
from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "clinic_core.iam"
    verbose_name = "Identity and sessions"

    def ready(self) -> None:
        # registers the SessionJWTAuthentication scheme with drf-spectacular
        from clinic_core.iam import openapi  # noqa: F401
