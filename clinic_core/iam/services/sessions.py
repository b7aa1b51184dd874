# backend/clinic_core/iam/services/sessions.py
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from clinic_core.audit.services import AuditService
from clinic_core.iam.models import SessionToken, User

logger = logging.getLogger(__name__)


class InvalidCredentials(Exception):
    """Email/password pair does not match an active user."""


class SessionService:
    @staticmethod
    def issue_token(user: User) -> str:
        """
        New signed token + registry row. Earlier tokens stay valid,
        so several devices can be logged in at once.
        """
        token = AccessToken.for_user(user)
        SessionToken.objects.create(jti=token[api_settings.JTI_CLAIM], user=user)
        return str(token)

    @staticmethod
    def revoke_all_tokens(user: User) -> int:
        deleted, _ = SessionToken.objects.filter(user=user).delete()
        return deleted

    @staticmethod
    def login(*, email: str, password: str) -> tuple[User, str]:
        user = authenticate(request=None, email=email, password=password)

        if user is None or user.deleted_at is not None:
            AuditService.record(
                actor_id=None,
                action="login_failed",
                description=f"Failed login for {email}",
                affected_table="iam_user",
            )
            raise InvalidCredentials("Invalid credentials.")

        token = SessionService.issue_token(user)
        update_last_login(None, user)

        AuditService.record(
            actor_id=user.id,
            action="login",
            description="User logged in",
            affected_table="iam_user",
            record_id=user.id,
        )
        logger.info("User %s logged in", user.id)
        return user, token

    @staticmethod
    def logout(*, actor: User) -> int:
        revoked = SessionService.revoke_all_tokens(actor)
        AuditService.record(
            actor_id=actor.id,
            action="logout",
            description=f"User logged out ({revoked} token(s) revoked)",
            affected_table="iam_user",
            record_id=actor.id,
        )
        return revoked
