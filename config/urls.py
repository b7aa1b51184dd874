# backend/config/urls.py
from django.contrib import admin
from django.urls import include, path

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path("admin/", admin.site.urls),

    # OpenAPI
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    # Primary versioned API
    path("api/v1/", include("clinic_core.api.urls")),

    # Unversioned alias for older clients (/api/login/, /api/appointments/, ...)
    # Keep AFTER schema/docs so those explicit routes win.
    path("api/", include("clinic_core.api.urls")),
]
