# backend/clinic_core/documents/api/views.py
from __future__ import annotations

from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from clinic_core.common.api.params import parse_positive_int
from clinic_core.common.permissions import PolicyPermission
from clinic_core.common.policy import RESOURCE_DOCUMENT
from clinic_core.common.views import AuditedViewSet
from clinic_core.documents.api.serializers import DocumentSerializer, DocumentUploadSerializer
from clinic_core.documents.models import Document
from clinic_core.documents.services import DocumentService


class DocumentViewSet(AuditedViewSet):
    permission_classes = [PolicyPermission]
    policy_resource = RESOURCE_DOCUMENT
    # record-level rules are applied by DocumentService
    policy_actions = {
        "list": "list",
        "retrieve": None,
        "create": "upload",
        "destroy": None,
        "download": None,
    }
    parser_classes = [MultiPartParser, FormParser]
    audit_table = "documents_document"

    serializer_class = DocumentSerializer
    queryset = Document.objects.none()

    @extend_schema(tags=["Documents"], responses={200: DocumentSerializer(many=True)})
    def list(self, request):
        documents = DocumentService.list_documents(actor=request.user)
        return Response({"documents": DocumentSerializer(documents, many=True).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Documents"], responses={200: DocumentSerializer})
    def retrieve(self, request, pk=None):
        document = DocumentService.get_document(actor=request.user, document_id=parse_positive_int(pk))
        return Response({"document": DocumentSerializer(document).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Documents"], request=DocumentUploadSerializer, responses={201: DocumentSerializer})
    def create(self, request):
        ser = DocumentUploadSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        document = DocumentService.upload_document(
            actor=request.user,
            uploaded_file=data["file"],
            history=data.get("history"),
            name=data.get("name") or None,
            description=data.get("description", ""),
        )
        return Response(
            {"message": "Document uploaded successfully", "document": DocumentSerializer(document).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Documents"], responses={200: None})
    def destroy(self, request, pk=None):
        DocumentService.delete_document(actor=request.user, document_id=parse_positive_int(pk))
        return Response({"message": "Document deleted successfully"}, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Documents"],
        responses={200: OpenApiResponse(response=OpenApiTypes.BINARY, description="Document binary")},
    )
    @action(detail=True, methods=["get"])
    def download(self, request, pk=None):
        result = DocumentService.download_document(actor=request.user, document_id=parse_positive_int(pk))
        document = result.document
        return FileResponse(
            result.stream,
            as_attachment=True,
            filename=document.download_name,
            content_type=document.mime_type or "application/octet-stream",
        )
