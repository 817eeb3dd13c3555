from rest_framework import serializers
from django.contrib.auth import get_user_model, authenticate
from django.core.validators import RegexValidator
from django.db import transaction
from rest_framework_simplejwt.tokens import RefreshToken

from apps.cores.utils.file_validation import validate_image_upload
from .models import Profile, Role, Mode, KycStatus, SKILL_OPTIONS


User = get_user_model()


def _user_payload(user):
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "full_name": user.profile.full_name,
        "mode": user.profile.mode,
    }


# -------- Signup --------
class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    confirm_password = serializers.CharField(write_only=True)
    full_name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=[Role.CUSTOMER, Role.FREELANCER], default=Role.CUSTOMER)

    def validate_email(self, value):
        value = value.lower().strip()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("อีเมลนี้ถูกใช้งานแล้ว")
        return value

    def validate_full_name(self, value):
        if not value.strip():
            raise serializers.ValidationError("กรุณาใส่ชื่อ-นามสกุล")
        return value.strip()

    def validate(self, data):
        if data["password"] != data["confirm_password"]:
            raise serializers.ValidationError({"confirm_password": "รหัสผ่านไม่ตรงกัน"})
        if len(data["password"]) < 6:
            raise serializers.ValidationError({"password": "รหัสผ่านต้องมีอย่างน้อย 6 ตัวอักษร"})
        return data

    @transaction.atomic
    def create(self, validated_data):
        validated_data.pop("confirm_password")
        role = validated_data["role"]

        user = User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            role=role,
        )
        # profile row comes from the post_save signal; signup role decides the starting mode
        profile = user.profile
        profile.full_name = validated_data["full_name"]
        profile.phone = validated_data.get("phone", "").strip()
        profile.location = validated_data.get("location", "").strip()
        profile.mode = Mode.FREELANCER if role == Role.FREELANCER else Mode.CUSTOMER
        profile.save()
        return user


# -------- Login --------
class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, data):
        email = data.get('email').lower().strip()
        password = data.get('password')

        user = authenticate(email=email, password=password)
        if not user:
            raise serializers.ValidationError("อีเมลหรือรหัสผ่านไม่ถูกต้อง")

        if not user.is_active:
            raise serializers.ValidationError("บัญชีนี้ถูกระงับการใช้งาน")

        profile = user.profile

        refresh = RefreshToken.for_user(user)
        return {
            "refresh": str(refresh),
            "access": str(refresh.access_token),
            "user": _user_payload(user),
            "redirect_to": profile.dashboard_path(),
        }


# -------- Profiles --------
class ProfileSummarySerializer(serializers.ModelSerializer):
    """Public card shown next to jobs and services."""
    user_id = serializers.IntegerField(source="user.id", read_only=True)

    class Meta:
        model = Profile
        fields = [
            "id",
            "user_id",
            "full_name",
            "phone",
            "location",
            "avg_rating",
            "total_jobs",
            "is_verified",
        ]
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source='user.email', read_only=True)
    role = serializers.CharField(source='user.role', read_only=True)

    phone = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=20,
        validators=[
            RegexValidator(
                regex=r'^[0-9+\- ]*$',
                message='เบอร์โทรศัพท์ไม่ถูกต้อง'
            )
        ]
    )
    skills = serializers.ListField(
        child=serializers.ChoiceField(choices=SKILL_OPTIONS),
        required=False,
    )

    class Meta:
        model = Profile
        fields = [
            "id",
            "email",
            "role",
            "full_name",
            "phone",
            "location",
            "bio",
            "skills",
            "mode",
            "kyc_status",
            "is_verified",
            "bank_name",
            "avg_rating",
            "total_jobs",
            "spending_total",
            "earning_total",
            "lottery_count_this_month",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "email",
            "role",
            "mode",
            "kyc_status",
            "is_verified",
            "bank_name",
            "avg_rating",
            "total_jobs",
            "spending_total",
            "earning_total",
            "lottery_count_this_month",
            "created_at",
            "updated_at",
        ]

    def validate_bio(self, value):
        return (value or "").strip() or None

    def validate_location(self, value):
        return value.strip()

    def validate_phone(self, value):
        return value.strip()

    def validate_skills(self, value):
        # keep the order the user picked, drop repeats
        return list(dict.fromkeys(value))


class ModeSwitchSerializer(serializers.Serializer):
    mode = serializers.ChoiceField(choices=Mode.choices)


class KycSubmitSerializer(serializers.Serializer):
    bank_account_number = serializers.CharField(
        max_length=50, allow_blank=True,
        error_messages={"required": "กรุณาใส่เลขบัญชีธนาคาร"},
    )
    bank_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    id_card = serializers.FileField(error_messages={"required": "กรุณาอัปโหลดรูปบัตรประชาชน"})
    selfie_with_id = serializers.FileField(error_messages={"required": "กรุณาอัปโหลดรูปถ่ายคู่บัตร"})

    def validate_bank_account_number(self, value):
        if not value.strip():
            raise serializers.ValidationError("กรุณาใส่เลขบัญชีธนาคาร")
        return value.strip()

    def validate_id_card(self, value):
        return validate_image_upload(value)

    def validate_selfie_with_id(self, value):
        return validate_image_upload(value)

    def validate(self, attrs):
        if not self.instance.can_submit_kyc:
            raise serializers.ValidationError("ไม่สามารถยื่น KYC ซ้ำได้ในสถานะปัจจุบัน")
        return attrs

    def update(self, instance, validated_data):
        instance.bank_account_number = validated_data["bank_account_number"]
        instance.bank_name = validated_data.get("bank_name", "").strip() or "ไม่ระบุ"
        instance.id_card = validated_data["id_card"]
        instance.selfie_with_id = validated_data["selfie_with_id"]
        instance.kyc_status = KycStatus.PENDING
        instance.save()
        return instance


class AdminProfileSerializer(ProfileSerializer):
    id_card_url = serializers.SerializerMethodField()
    selfie_with_id_url = serializers.SerializerMethodField()

    class Meta(ProfileSerializer.Meta):
        fields = ProfileSerializer.Meta.fields + [
            "bank_account_number",
            "id_card_url",
            "selfie_with_id_url",
        ]
        read_only_fields = fields

    def get_id_card_url(self, obj):
        return obj.id_card.url if obj.id_card else None

    def get_selfie_with_id_url(self, obj):
        return obj.selfie_with_id.url if obj.selfie_with_id else None
