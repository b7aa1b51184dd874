# backend/clinic_core/iam/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from clinic_core.common.permissions import ALL_ROLES, ROLE_USER, primary_role, user_roles
from clinic_core.iam.models import User


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class ActorSerializer(serializers.ModelSerializer):
    """
    The user payload of /login/ and /me/.
    """
    role = serializers.SerializerMethodField()
    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "name", "surnames", "email", "role", "roles"]
        read_only_fields = fields

    def get_roles(self, obj) -> list[str]:
        return sorted(user_roles(obj))

    def get_role(self, obj) -> str:
        return primary_role(user_roles(obj))


class LoginResponseSerializer(serializers.Serializer):
    access_token = serializers.CharField()
    token_type = serializers.CharField()
    user = ActorSerializer()


class MessageSerializer(serializers.Serializer):
    message = serializers.CharField()


class UserSerializer(ActorSerializer):
    class Meta(ActorSerializer.Meta):
        fields = ["id", "name", "surnames", "email", "role", "roles", "is_active", "date_joined", "updated_at"]
        read_only_fields = fields


class UserCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    surnames = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True, trim_whitespace=False)
    role = serializers.ChoiceField(choices=sorted(ALL_ROLES), required=False, default=ROLE_USER)

    def validate_email(self, value: str) -> str:
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value


class UserUpdateSerializer(serializers.Serializer):
    """
    Partial update contract (PUT/PATCH).
    """
    name = serializers.CharField(max_length=150, required=False)
    surnames = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(min_length=6, required=False, write_only=True, trim_whitespace=False)

    def validate_email(self, value: str) -> str:
        user_id = self.context.get("user_id")
        if User.objects.filter(email__iexact=value).exclude(id=user_id).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs
