# backend/clinic_core/patients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from clinic_core.iam.models import User
from clinic_core.patients.models import Patient


class PatientCreateSerializer(serializers.Serializer):
    """
    Either `user_id` of an existing user, or name/surnames/email/password
    to create the user together with the profile.
    """
    user_id = serializers.PrimaryKeyRelatedField(queryset=User.objects.active(), required=False)
    name = serializers.CharField(max_length=150, required=False)
    surnames = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False)
    password = serializers.CharField(min_length=6, required=False, write_only=True, trim_whitespace=False)

    medical_record_number = serializers.CharField(max_length=64)
    admission_date = serializers.DateField()
    discharge_date = serializers.DateField(required=False, allow_null=True)

    def validate_user_id(self, user):
        if Patient.all_objects.filter(user=user).exists():
            raise serializers.ValidationError("This user already has a patient profile.")
        return user

    def validate_email(self, value: str) -> str:
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value

    def validate_medical_record_number(self, value: str) -> str:
        if Patient.all_objects.filter(medical_record_number=value).exists():
            raise serializers.ValidationError("This medical record number already exists.")
        return value

    def validate(self, attrs):
        has_user = attrs.get("user_id") is not None
        new_user_fields = [f for f in ("name", "email", "password") if attrs.get(f)]

        if has_user and new_user_fields:
            raise serializers.ValidationError("Send either user_id or the new user's data, not both.")
        if not has_user and len(new_user_fields) != 3:
            raise serializers.ValidationError("user_id, or name, email and password are required.")

        discharge = attrs.get("discharge_date")
        if discharge and discharge < attrs["admission_date"]:
            raise serializers.ValidationError({"discharge_date": "Discharge date cannot precede admission date."})
        return attrs

    def to_service_kwargs(self) -> dict:
        data = self.validated_data
        kwargs = {
            "medical_record_number": data["medical_record_number"],
            "admission_date": data["admission_date"],
            "discharge_date": data.get("discharge_date"),
        }
        if data.get("user_id") is not None:
            kwargs["user"] = data["user_id"]
        else:
            kwargs["new_user"] = {
                "name": data["name"],
                "surnames": data.get("surnames", ""),
                "email": data["email"],
                "password": data["password"],
            }
        return kwargs


class PatientUpdateSerializer(serializers.Serializer):
    """
    Partial update contract (PUT/PATCH).
    """
    medical_record_number = serializers.CharField(max_length=64, required=False)
    admission_date = serializers.DateField(required=False)
    discharge_date = serializers.DateField(required=False, allow_null=True)

    def validate_medical_record_number(self, value: str) -> str:
        patient_id = self.context.get("patient_id")
        if Patient.all_objects.filter(medical_record_number=value).exclude(id=patient_id).exists():
            raise serializers.ValidationError("This medical record number already exists.")
        return value

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class PatientSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(source="user.name", read_only=True)
    surnames = serializers.CharField(source="user.surnames", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)

    class Meta:
        model = Patient
        fields = [
            "id",
            "user_id",
            "name",
            "surnames",
            "email",
            "medical_record_number",
            "admission_date",
            "discharge_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
