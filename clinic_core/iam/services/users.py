# backend/clinic_core/iam/services/users.py
from __future__ import annotations

import logging

from django.contrib.auth.models import Group
from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinic_core.audit.services import AuditService
from clinic_core.common.api.exceptions import InternalError
from clinic_core.common.permissions import ROLE_USER
from clinic_core.iam.models import SessionToken, User

logger = logging.getLogger(__name__)

TABLE = "iam_user"


def assign_role(user: User, role: str) -> None:
    group, _ = Group.objects.get_or_create(name=role)
    user.groups.add(group)


def create_user_row(*, name: str, surnames: str, email: str, password: str, role: str = ROLE_USER) -> User:
    """
    Plain insert used by user, patient and specialist creation.
    Callers own the surrounding transaction.
    """
    user = User.objects.create_user(email=email, password=password, name=name, surnames=surnames or "")
    assign_role(user, role)
    return user


class UserService:
    @staticmethod
    def list_users(*, actor: User) -> QuerySet[User]:
        qs = User.objects.active().prefetch_related("groups").order_by("id")
        AuditService.record(actor_id=actor.id, action="list_users", affected_table=TABLE)
        return qs

    @staticmethod
    def get_user(*, actor: User, user_id: int) -> User:
        user = User.objects.active().prefetch_related("groups").filter(id=user_id).first()
        if user is None:
            AuditService.record(
                actor_id=actor.id,
                action="view_user_failed",
                description="User not found",
                affected_table=TABLE,
                record_id=user_id,
            )
            raise NotFound("User not found.")

        AuditService.record(actor_id=actor.id, action="view_user", affected_table=TABLE, record_id=user.id)
        return user

    @staticmethod
    def create_user(
        *,
        actor: User,
        name: str,
        surnames: str,
        email: str,
        password: str,
        role: str = ROLE_USER,
    ) -> User:
        try:
            with transaction.atomic():
                user = create_user_row(name=name, surnames=surnames, email=email, password=password, role=role)
        except DatabaseError as exc:
            logger.exception("User creation failed for %s", email)
            AuditService.record(
                actor_id=actor.id,
                action="create_user_error",
                description=str(exc),
                affected_table=TABLE,
            )
            raise InternalError("Error creating the user.")

        AuditService.record(actor_id=actor.id, action="create_user", affected_table=TABLE, record_id=user.id)
        return user

    @staticmethod
    def update_user(*, actor: User, user_id: int, data: dict) -> User:
        user = User.objects.active().filter(id=user_id).first()
        if user is None:
            AuditService.record(
                actor_id=actor.id,
                action="update_user_failed",
                description="User not found",
                affected_table=TABLE,
                record_id=user_id,
            )
            raise NotFound("User not found.")

        allowed = {"name", "surnames", "email"}
        updates = {k: v for k, v in (data or {}).items() if k in allowed}

        try:
            with transaction.atomic():
                for k, v in updates.items():
                    setattr(user, k, v)
                if data.get("password"):
                    user.set_password(data["password"])
                user.save()
        except DatabaseError as exc:
            logger.exception("User update failed for %s", user_id)
            AuditService.record(
                actor_id=actor.id,
                action="update_user_error",
                description=str(exc),
                affected_table=TABLE,
                record_id=user_id,
            )
            raise InternalError("Error updating the user.")

        changed = sorted(updates.keys()) + (["password"] if data.get("password") else [])
        AuditService.record(
            actor_id=actor.id,
            action="update_user",
            description=f"Updated fields: {', '.join(changed) or 'none'}",
            affected_table=TABLE,
            record_id=user.id,
        )
        return user

    @staticmethod
    def delete_user(*, actor: User, user_id: int) -> None:
        user = User.objects.active().filter(id=user_id).first()
        if user is None:
            AuditService.record(
                actor_id=actor.id,
                action="delete_user_failed",
                description="User not found",
                affected_table=TABLE,
                record_id=user_id,
            )
            raise NotFound("User not found.")

        try:
            with transaction.atomic():
                user.deleted_at = timezone.now()
                user.is_active = False
                user.save(update_fields=["deleted_at", "is_active", "updated_at"])
                SessionToken.objects.filter(user=user).delete()
        except DatabaseError as exc:
            logger.exception("User deletion failed for %s", user_id)
            AuditService.record(
                actor_id=actor.id,
                action="delete_user_error",
                description=str(exc),
                affected_table=TABLE,
                record_id=user_id,
            )
            raise InternalError("Error deleting the user.")

        AuditService.record(actor_id=actor.id, action="delete_user", affected_table=TABLE, record_id=user_id)
