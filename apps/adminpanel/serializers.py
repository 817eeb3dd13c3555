from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class AdminUserSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source="profile.full_name", read_only=True)
    mode = serializers.CharField(source="profile.mode", read_only=True)
    kyc_status = serializers.CharField(source="profile.kyc_status", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "role",
            "is_active",
            "date_joined",
            "full_name",
            "mode",
            "kyc_status",
        ]
        read_only_fields = fields


class KycDecisionSerializer(serializers.Serializer):
    APPROVE = "approve"
    REJECT = "reject"

    decision = serializers.ChoiceField(choices=[APPROVE, REJECT])
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500)
