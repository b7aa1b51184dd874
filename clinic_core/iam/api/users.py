# backend/clinic_core/iam/api/users.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response

from clinic_core.common.api.params import parse_positive_int
from clinic_core.common.permissions import PolicyPermission
from clinic_core.common.policy import RESOURCE_USER
from clinic_core.common.views import AuditedViewSet
from clinic_core.iam.api.serializers import UserCreateSerializer, UserSerializer, UserUpdateSerializer
from clinic_core.iam.models import User
from clinic_core.iam.services.users import UserService


class UserViewSet(AuditedViewSet):
    """
    Administrator-only user management.
    """
    permission_classes = [PolicyPermission]
    policy_resource = RESOURCE_USER
    audit_table = "iam_user"

    serializer_class = UserSerializer
    queryset = User.objects.none()

    @extend_schema(tags=["Users"], responses={200: UserSerializer(many=True)})
    def list(self, request):
        users = UserService.list_users(actor=request.user)
        return Response({"users": UserSerializer(users, many=True).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], responses={200: UserSerializer})
    def retrieve(self, request, pk=None):
        user_id = parse_positive_int(pk)
        user = UserService.get_user(actor=request.user, user_id=user_id)
        return Response({"user": UserSerializer(user).data}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Users"], request=UserCreateSerializer, responses={201: UserSerializer})
    def create(self, request):
        ser = UserCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        user = UserService.create_user(actor=request.user, **ser.validated_data)
        return Response(
            {"message": "User created successfully", "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Users"], request=UserUpdateSerializer, responses={200: UserSerializer})
    def update(self, request, pk=None):
        user_id = parse_positive_int(pk)
        ser = UserUpdateSerializer(data=request.data, context={"user_id": user_id})
        ser.is_valid(raise_exception=True)

        user = UserService.update_user(actor=request.user, user_id=user_id, data=ser.validated_data)
        return Response(
            {"message": "User updated successfully", "user": UserSerializer(user).data},
            status=status.HTTP_200_OK,
        )

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Users"], responses={200: None})
    def destroy(self, request, pk=None):
        user_id = parse_positive_int(pk)
        UserService.delete_user(actor=request.user, user_id=user_id)
        return Response({"message": "User deleted successfully"}, status=status.HTTP_200_OK)
