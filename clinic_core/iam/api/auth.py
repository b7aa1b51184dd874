# backend/clinic_core/iam/api/auth.py

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from clinic_core.common.views import AccessDenialAuditMixin
from clinic_core.iam.api.serializers import (
    ActorSerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
    MessageSerializer,
)
from clinic_core.iam.services.sessions import InvalidCredentials, SessionService


class LoginView(APIView):
    # A stale Authorization header must not block a fresh login.
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=LoginRequestSerializer,
        responses={200: LoginResponseSerializer, 401: OpenApiResponse(MessageSerializer)},
        tags=["IAM"],
    )
    def post(self, request):
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user, token = SessionService.login(
                email=serializer.validated_data["email"],
                password=serializer.validated_data["password"],
            )
        except InvalidCredentials:
            return Response({"message": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)

        return Response(
            {
                "access_token": token,
                "token_type": "Bearer",
                "user": ActorSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )


class LogoutView(AccessDenialAuditMixin, APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: MessageSerializer}, tags=["IAM"])
    def post(self, request):
        SessionService.logout(actor=request.user)
        return Response({"message": "Logged out successfully"}, status=status.HTTP_200_OK)
