# backend/clinic_core/specialists/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from clinic_core.iam.models import User
from clinic_core.specialists.models import Specialist


class SpecialistCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    surnames = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True, trim_whitespace=False)
    password_confirmation = serializers.CharField(write_only=True, trim_whitespace=False)
    specialty = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")

    def validate_email(self, value: str) -> str:
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value

    def validate(self, attrs):
        if attrs["password"] != attrs.pop("password_confirmation"):
            raise serializers.ValidationError({"password": "The password confirmation does not match."})
        return attrs


class SpecialistUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False)
    surnames = serializers.CharField(max_length=150, required=False, allow_blank=True)
    specialty = serializers.CharField(max_length=255, required=False)
    phone = serializers.CharField(max_length=32, required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class SpecialistSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(source="user.name", read_only=True)
    surnames = serializers.CharField(source="user.surnames", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Specialist
        fields = ["id", "user_id", "name", "surnames", "email", "specialty", "phone", "created_at", "updated_at"]
        read_only_fields = fields
