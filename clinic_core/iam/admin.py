# backend/clinic_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from clinic_core.iam.models import SessionToken, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "name", "surnames", "is_active", "deleted_at")
    list_filter = ("is_active", "is_staff", "groups")
    search_fields = ("email", "name", "surnames")
    fields = ("email", "name", "surnames", "is_active", "is_staff", "groups", "last_login", "deleted_at")
    readonly_fields = ("last_login", "deleted_at")
    filter_horizontal = ("groups",)
    ordering = ("id",)


@admin.register(SessionToken)
class SessionTokenAdmin(admin.ModelAdmin):
    list_display = ("user", "jti", "created_at", "last_used_at")
    search_fields = ("user__email", "jti")
    ordering = ("-created_at",)
