# backend/clinic_core/documents/storage.py
"""
Storage gateway for uploaded clinical documents.

Binaries live in the "documents" entry of settings.STORAGES, which must not
be web-served. Callers deal in opaque keys (`Document.path`); only this
module knows how keys map to the underlying backend.
"""
from __future__ import annotations

import logging
import uuid
from pathlib import PurePosixPath

from django.conf import settings
from django.core.files.storage import Storage, storages

logger = logging.getLogger(__name__)

STORAGE_ALIAS = "documents"


class DocumentStorage:
    def __init__(self, backend: Storage):
        self.backend = backend

    @staticmethod
    def build_key(original_name: str) -> str:
        ext = PurePosixPath(original_name or "").suffix.lower().lstrip(".")
        upload_dir = getattr(settings, "DOCUMENT_UPLOAD_DIR", "documents").strip("/")
        name = uuid.uuid4().hex
        return f"{upload_dir}/{name}.{ext}" if ext else f"{upload_dir}/{name}"

    def save(self, uploaded_file) -> str:
        """
        Store the file under a fresh key and return the key actually used.
        Raises OSError if the backend cannot write.
        """
        key = self.backend.save(self.build_key(uploaded_file.name), uploaded_file)
        logger.info("Stored document binary key=%s size=%s", key, getattr(uploaded_file, "size", None))
        return key

    def exists(self, key: str) -> bool:
        return bool(key) and self.backend.exists(key)

    def open(self, key: str):
        return self.backend.open(key, "rb")

    def delete(self, key: str) -> None:
        if self.exists(key):
            self.backend.delete(key)
            logger.info("Deleted document binary key=%s", key)


def get_document_storage() -> DocumentStorage:
    return DocumentStorage(storages[STORAGE_ALIAS])
