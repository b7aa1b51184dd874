# backend/clinic_core/documents/tests/test_documents_api.py
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError

from clinic_core.appointments.models import AppointmentStatus
from clinic_core.conftest import audit_actions
from clinic_core.documents.models import Document
from clinic_core.documents.storage import DocumentStorage
from clinic_core.histories.models import MedicalHistory

pytestmark = pytest.mark.django_db

PDF_BYTES = b"%PDF-1.4 test document"


def _pdf(name="report.pdf", content=PDF_BYTES):
    return SimpleUploadedFile(name, content, content_type="application/pdf")


def _stored_files(root):
    return [p for p in root.rglob("*") if p.is_file()] if root.exists() else []


def _upload(client, **data):
    data.setdefault("file", _pdf())
    return client.post("/api/documents/", data, format="multipart")


@pytest.fixture
def own_document(api_client, patient_user, patient, document_storage):
    res = _upload(api_client(patient_user), description="Blood test")
    assert res.status_code == 201, res.data
    return Document.objects.get(id=res.data["document"]["id"])


# ----------------------------
# Upload
# ----------------------------
def test_upload_stores_binary_and_metadata(api_client, patient_user, patient, document_storage):
    res = _upload(api_client(patient_user), name="Lab results", description="March")

    assert res.status_code == 201, res.data
    body = res.data["document"]
    assert body["name"] == "Lab results"
    assert body["owner_id"] == patient_user.id
    assert body["size"] == len(PDF_BYTES)
    assert body["mime_type"] == "application/pdf"
    assert "path" not in body

    doc = Document.objects.get(id=body["id"])
    assert doc.path.startswith("documents/") and doc.path.endswith(".pdf")
    assert (document_storage / doc.path).read_bytes() == PDF_BYTES
    assert audit_actions(actor_user=patient_user) == ["upload_document"]


def test_upload_linked_to_history(api_client, specialist_user, patient, specialist, document_storage):
    history = MedicalHistory.objects.create(patient=patient, specialist=specialist)

    res = _upload(api_client(specialist_user), history_id=history.id)
    assert res.status_code == 201, res.data
    assert res.data["document"]["history_id"] == history.id


def test_disallowed_type_is_422_without_storage_write(api_client, patient_user, document_storage):
    res = _upload(
        api_client(patient_user),
        file=SimpleUploadedFile("script.exe", b"MZ", content_type="application/octet-stream"),
    )

    assert res.status_code == 422
    assert "file" in res.json()["error"]["details"]
    assert _stored_files(document_storage) == []
    assert audit_actions() == []


def test_oversized_upload_is_422_without_storage_write(api_client, patient_user, document_storage, settings):
    settings.DOCUMENT_MAX_UPLOAD_BYTES = 8

    res = _upload(api_client(patient_user))

    assert res.status_code == 422
    assert _stored_files(document_storage) == []
    assert not Document.objects.exists()
    assert audit_actions() == []


@pytest.mark.parametrize(
    "upload",
    [
        SimpleUploadedFile("invoice.pdf", b"MZ\x90\x00\x03", content_type="application/x-msdownload"),
        SimpleUploadedFile("invoice.pdf", b"MZ\x90\x00\x03", content_type="application/pdf"),
        SimpleUploadedFile("photo.png", PDF_BYTES, content_type="application/pdf"),
    ],
    ids=["foreign-mime", "content-mismatch", "mime-extension-mismatch"],
)
def test_mislabelled_upload_is_422_without_storage_write(api_client, patient_user, document_storage, upload):
    res = _upload(api_client(patient_user), file=upload)

    assert res.status_code == 422
    assert "file" in res.json()["error"]["details"]
    assert _stored_files(document_storage) == []
    assert not Document.objects.exists()
    assert audit_actions() == []


def test_png_upload_is_accepted(api_client, patient_user, document_storage):
    png = SimpleUploadedFile("scan.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 32, content_type="image/png")

    res = _upload(api_client(patient_user), file=png)

    assert res.status_code == 201, res.data
    assert res.data["document"]["mime_type"] == "image/png"


def test_cannot_attach_to_unrelated_history(
    api_client, other_patient_user, other_patient, patient, specialist, document_storage
):
    history = MedicalHistory.objects.create(patient=patient, specialist=specialist)

    res = _upload(api_client(other_patient_user), history_id=history.id)

    assert res.status_code == 403
    assert _stored_files(document_storage) == []
    assert not Document.objects.exists()
    assert audit_actions(actor_user=other_patient_user) == ["upload_document_denied"]


def test_metadata_failure_removes_stored_binary(api_client, patient_user, document_storage, monkeypatch):
    def boom(*args, **kwargs):
        raise DatabaseError("insert failed")

    monkeypatch.setattr(Document.objects, "create", boom)

    res = _upload(api_client(patient_user))

    assert res.status_code == 500
    assert _stored_files(document_storage) == []
    assert audit_actions(actor_user=patient_user) == ["upload_document_error"]


# ----------------------------
# Visibility
# ----------------------------
def test_patient_cannot_view_another_patients_document(
    api_client, other_patient_user, other_patient, own_document
):
    res = api_client(other_patient_user).get(f"/api/documents/{own_document.id}/")

    assert res.status_code == 403
    assert audit_actions(actor_user=other_patient_user) == ["view_document_unauthorized"]


def test_owner_views_document(api_client, patient_user, own_document):
    res = api_client(patient_user).get(f"/api/documents/{own_document.id}/")
    assert res.status_code == 200
    assert res.data["document"]["id"] == own_document.id


def test_list_is_filtered_by_visibility(
    api_client, admin_user, specialist_user, other_specialist_user, other_specialist, other_patient_user,
    appointment, own_document,
):
    # specialist_user has an appointment with the document owner's patient profile
    assert [d["id"] for d in api_client(specialist_user).get("/api/documents/").data["documents"]] == [
        own_document.id
    ]
    assert api_client(other_specialist_user).get("/api/documents/").data["documents"] == []
    assert api_client(other_patient_user).get("/api/documents/").data["documents"] == []
    assert len(api_client(admin_user).get("/api/documents/").data["documents"]) == 1

    assert audit_actions(actor_user=specialist_user) == ["list_documents"]


def test_specialist_views_document_of_care_patient(api_client, specialist_user, appointment, own_document):
    res = api_client(specialist_user).get(f"/api/documents/{own_document.id}/")

    assert res.status_code == 200, res.data
    assert res.data["document"]["id"] == own_document.id
    assert audit_actions(actor_user=specialist_user) == ["view_document"]


def test_specialist_without_appointment_cannot_view_document(
    api_client, other_specialist_user, other_specialist, appointment, own_document
):
    res = api_client(other_specialist_user).get(f"/api/documents/{own_document.id}/")

    assert res.status_code == 403
    assert audit_actions(actor_user=other_specialist_user) == ["view_document_unauthorized"]


def test_missing_document_is_404(api_client, patient_user, document_storage):
    res = api_client(patient_user).get("/api/documents/999/")
    assert res.status_code == 404
    assert audit_actions(actor_user=patient_user) == ["view_document_failed"]


# ----------------------------
# Download
# ----------------------------
def test_owner_downloads(api_client, patient_user, own_document):
    res = api_client(patient_user).get(f"/api/documents/{own_document.id}/download/")

    assert res.status_code == 200
    assert b"".join(res.streaming_content) == PDF_BYTES
    assert res["Content-Type"] == "application/pdf"
    assert "attachment" in res["Content-Disposition"]
    assert audit_actions(actor_user=patient_user)[-1] == "download_document"


def test_download_filename_keeps_stored_extension(api_client, patient_user, patient, document_storage):
    client = api_client(patient_user)
    document_id = _upload(client, name="Lab results").data["document"]["id"]

    res = client.get(f"/api/documents/{document_id}/download/")

    assert res.status_code == 200
    assert 'filename="Lab results.pdf"' in res["Content-Disposition"]


def test_specialist_download_needs_active_care(api_client, specialist_user, make_appointment, own_document):
    cancelled = make_appointment(status=AppointmentStatus.CANCELLED)
    client = api_client(specialist_user)

    denied = client.get(f"/api/documents/{own_document.id}/download/")
    assert denied.status_code == 403
    assert audit_actions(actor_user=specialist_user) == ["download_document_denied"]

    cancelled.status = AppointmentStatus.PENDING
    cancelled.save()
    assert client.get(f"/api/documents/{own_document.id}/download/").status_code == 200


def test_admin_cannot_download(api_client, admin_user, own_document):
    assert api_client(admin_user).get(f"/api/documents/{own_document.id}/download/").status_code == 403


def test_download_with_missing_binary_is_404(api_client, patient_user, own_document, document_storage):
    (document_storage / own_document.path).unlink()

    res = api_client(patient_user).get(f"/api/documents/{own_document.id}/download/")

    assert res.status_code == 404
    assert audit_actions(actor_user=patient_user)[-1] == "download_document_file_missing"


def test_download_unknown_document_is_404(api_client, patient_user, document_storage):
    res = api_client(patient_user).get("/api/documents/12345/download/")
    assert res.status_code == 404
    assert audit_actions(actor_user=patient_user) == ["download_document_failed"]


# ----------------------------
# Delete
# ----------------------------
def test_owner_deletes_document(api_client, patient_user, own_document, document_storage):
    res = api_client(patient_user).delete(f"/api/documents/{own_document.id}/")

    assert res.status_code == 200
    assert _stored_files(document_storage) == []
    assert Document.all_objects.get(id=own_document.id).deleted_at is not None
    assert audit_actions(actor_user=patient_user)[-1] == "delete_document"


def test_non_owner_cannot_delete(api_client, specialist_user, appointment, own_document, document_storage):
    res = api_client(specialist_user).delete(f"/api/documents/{own_document.id}/")

    assert res.status_code == 403
    assert len(_stored_files(document_storage)) == 1
    assert Document.objects.filter(id=own_document.id).exists()
    assert audit_actions(actor_user=specialist_user) == ["delete_document_denied"]


def test_storage_failure_still_soft_deletes(api_client, admin_user, own_document, monkeypatch):
    def boom(self, key):
        raise OSError("read-only filesystem")

    monkeypatch.setattr(DocumentStorage, "delete", boom)

    res = api_client(admin_user).delete(f"/api/documents/{own_document.id}/")

    assert res.status_code == 500
    assert Document.all_objects.get(id=own_document.id).deleted_at is not None
    assert audit_actions(actor_user=admin_user) == ["delete_document_error"]


def test_delete_missing_document(api_client, admin_user, document_storage):
    res = api_client(admin_user).delete("/api/documents/31337/")
    assert res.status_code == 404
    assert audit_actions(actor_user=admin_user) == ["delete_document_failed"]
