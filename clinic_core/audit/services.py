# backend/clinic_core/audit/services.py
from __future__ import annotations

import logging

from django.db import DatabaseError, transaction

from clinic_core.audit.models import AuditEntry

logger = logging.getLogger(__name__)


class AuditService:
    """
    Central audit writer. Every service call path (success, not found,
    forbidden, internal error) calls `record` exactly once.
    """

    @staticmethod
    def record(
        *,
        actor_id: int | None,
        action: str,
        description: str | None = None,
        affected_table: str | None = None,
        record_id=None,
    ) -> AuditEntry | None:
        if not action:
            raise ValueError("Audit action code is required.")

        # Own savepoint: a failed insert must not poison the caller's transaction.
        try:
            with transaction.atomic():
                return AuditEntry.objects.create(
                    actor_user_id=actor_id,
                    action=action,
                    description=description or "",
                    affected_table=affected_table or "",
                    record_id="" if record_id is None else str(record_id)[:64],
                )
        except DatabaseError:
            logger.exception(
                "Audit write failed action=%s actor_id=%s table=%s record_id=%s",
                action,
                actor_id,
                affected_table,
                record_id,
            )
            return None
