# backend/clinic_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from clinic_core.appointments.api.views import AppointmentViewSet
from clinic_core.audit.api.views import AuditLogViewSet
from clinic_core.documents.api.views import DocumentViewSet
from clinic_core.histories.api.views import HistoryViewSet
from clinic_core.iam.api.auth import LoginView, LogoutView
from clinic_core.iam.api.me import MeView
from clinic_core.iam.api.users import UserViewSet
from clinic_core.patients.api.views import PatientViewSet
from clinic_core.specialists.api.views import SpecialistViewSet

router = DefaultRouter()

router.register(r"appointments", AppointmentViewSet, basename="appointments")
router.register(r"documents", DocumentViewSet, basename="documents")
router.register(r"histories", HistoryViewSet, basename="histories")
router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"specialists", SpecialistViewSet, basename="specialists")
router.register(r"users", UserViewSet, basename="users")

# Administrator audit log reads
router.register(r"logs", AuditLogViewSet, basename="logs")

urlpatterns = [
    path("login/", LoginView.as_view(), name="login"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
