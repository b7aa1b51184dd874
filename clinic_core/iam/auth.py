# backend/clinic_core/iam/auth.py

from __future__ import annotations

from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

from clinic_core.iam.models import SessionToken


class SessionJWTAuthentication(JWTAuthentication):
    """
    Authenticate using `Authorization: Bearer <token>`.

    On top of the signature check, the token's jti must still be registered
    in SessionToken. Logout removes the rows, which revokes every token of
    the user at once.
    """

    def get_validated_token(self, raw_token):
        validated_token = super().get_validated_token(raw_token)

        jti = validated_token.get(api_settings.JTI_CLAIM)
        if not jti:
            raise InvalidToken(_("Token has no id"))

        updated = SessionToken.objects.filter(jti=jti).update(last_used_at=timezone.now())
        if not updated:
            raise InvalidToken(_("Token has been revoked"))

        return validated_token

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if getattr(user, "deleted_at", None) is not None:
            raise AuthenticationFailed(_("User is inactive"), code="user_inactive")
        return user
