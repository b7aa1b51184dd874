# backend/clinic_core/documents/services.py
from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from rest_framework.exceptions import NotFound, PermissionDenied

from clinic_core.audit.services import AuditService
from clinic_core.common.api.exceptions import InternalError
from clinic_core.common.permissions import user_roles
from clinic_core.common.policy import RESOURCE_DOCUMENT, RESOURCE_HISTORY, evaluate
from clinic_core.documents.models import Document
from clinic_core.documents.selectors import document_ownership, get_document, visible_documents
from clinic_core.documents.storage import DocumentStorage, get_document_storage
from clinic_core.histories.selectors import history_ownership

logger = logging.getLogger(__name__)

TABLE = "documents_document"


@dataclass(frozen=True)
class DownloadResult:
    document: Document
    stream: object


def _audit(actor, action: str, *, record_id=None, description: str | None = None) -> None:
    AuditService.record(
        actor_id=actor.id,
        action=action,
        description=description,
        affected_table=TABLE,
        record_id=record_id,
    )


class DocumentService:
    """
    Documents combine a database row with a stored binary. The binary is
    written first and removed again if the row cannot be written, so no
    upload leaves an orphaned file behind.
    """

    @staticmethod
    def upload_document(
        *,
        actor,
        uploaded_file,
        history=None,
        name: str | None = None,
        description: str = "",
        storage: DocumentStorage | None = None,
    ) -> Document:
        storage = storage or get_document_storage()

        if history is not None:
            decision = evaluate(
                user_roles(actor),
                RESOURCE_HISTORY,
                "read",
                history_ownership(actor=actor, history=history),
            )
            if not decision:
                _audit(actor, "upload_document_denied", description=f"history {history.id}: {decision.reason}")
                raise PermissionDenied("You are not allowed to attach documents to this medical history.")

        try:
            key = storage.save(uploaded_file)
        except OSError as exc:
            logger.exception("Document binary write failed (name=%s)", uploaded_file.name)
            _audit(actor, "upload_document_error", description=f"storage: {exc}")
            raise InternalError("Error storing the document.")

        mime_type = getattr(uploaded_file, "content_type", "") or mimetypes.guess_type(uploaded_file.name)[0] or ""

        try:
            with transaction.atomic():
                document = Document.objects.create(
                    history=history,
                    owner=actor,
                    name=name or uploaded_file.name,
                    path=key,
                    mime_type=mime_type,
                    size=uploaded_file.size,
                    description=description or "",
                )
        except DatabaseError as exc:
            logger.exception("Document metadata write failed; removing binary key=%s", key)
            try:
                storage.delete(key)
            except OSError:
                logger.exception("Compensating delete failed for key=%s", key)
            _audit(actor, "upload_document_error", description=str(exc))
            raise InternalError("Error saving the document.")

        _audit(
            actor,
            "upload_document",
            record_id=document.id,
            description=f"{document.name} ({document.size} bytes)",
        )
        return document

    @staticmethod
    def list_documents(*, actor) -> QuerySet[Document]:
        qs = visible_documents(actor=actor, roles=user_roles(actor))
        _audit(actor, "list_documents")
        return qs

    @staticmethod
    def get_document(*, actor, document_id: int) -> Document:
        document = get_document(document_id)
        if document is None:
            _audit(actor, "view_document_failed", record_id=document_id, description="Document not found")
            raise NotFound("Document not found.")

        decision = evaluate(
            user_roles(actor),
            RESOURCE_DOCUMENT,
            "read",
            document_ownership(actor=actor, document=document),
        )
        if not decision:
            _audit(actor, "view_document_unauthorized", record_id=document_id, description=decision.reason)
            raise PermissionDenied("You are not allowed to view this document.")

        _audit(actor, "view_document", record_id=document.id)
        return document

    @staticmethod
    def download_document(*, actor, document_id: int, storage: DocumentStorage | None = None) -> DownloadResult:
        """
        Metadata lookup, then the download rule, then the binary itself.
        The caller owns the returned stream.
        """
        storage = storage or get_document_storage()

        document = get_document(document_id)
        if document is None:
            _audit(actor, "download_document_failed", record_id=document_id, description="Document not found")
            raise NotFound("Document not found.")

        decision = evaluate(
            user_roles(actor),
            RESOURCE_DOCUMENT,
            "download",
            document_ownership(actor=actor, document=document),
        )
        if not decision:
            _audit(actor, "download_document_denied", record_id=document_id, description=decision.reason)
            raise PermissionDenied("You are not allowed to download this document.")

        try:
            stream = storage.open(document.path) if storage.exists(document.path) else None
        except OSError as exc:
            logger.exception("Document binary read failed key=%s", document.path)
            _audit(actor, "download_document_error", record_id=document_id, description=str(exc))
            raise InternalError("Error reading the document.")

        if stream is None:
            logger.warning("Document %s has no stored binary at key=%s", document_id, document.path)
            _audit(actor, "download_document_file_missing", record_id=document_id, description=document.path)
            raise NotFound("Document file not found.")

        _audit(actor, "download_document", record_id=document.id)
        return DownloadResult(document=document, stream=stream)

    @staticmethod
    def delete_document(*, actor, document_id: int, storage: DocumentStorage | None = None) -> None:
        """
        Binary first, then the row. A storage failure still soft deletes
        the row and is reported as a single delete_document_error.
        """
        storage = storage or get_document_storage()

        document = get_document(document_id)
        if document is None:
            _audit(actor, "delete_document_failed", record_id=document_id, description="Document not found")
            raise NotFound("Document not found.")

        decision = evaluate(
            user_roles(actor),
            RESOURCE_DOCUMENT,
            "delete",
            document_ownership(actor=actor, document=document),
        )
        if not decision:
            _audit(actor, "delete_document_denied", record_id=document_id, description=decision.reason)
            raise PermissionDenied("You are not allowed to delete this document.")

        storage_error: Exception | None = None
        try:
            storage.delete(document.path)
        except OSError as exc:
            logger.exception("Document binary delete failed key=%s", document.path)
            storage_error = exc

        try:
            document.soft_delete()
        except DatabaseError as exc:
            logger.exception("Document deletion failed (id=%s)", document_id)
            _audit(actor, "delete_document_error", record_id=document_id, description=str(exc))
            raise InternalError("Error deleting the document.")

        if storage_error is not None:
            _audit(actor, "delete_document_error", record_id=document_id, description=f"storage: {storage_error}")
            raise InternalError("The document was removed but its file could not be deleted.")

        _audit(actor, "delete_document", record_id=document_id)
