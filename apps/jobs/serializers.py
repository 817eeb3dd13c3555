from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers

from apps.billing.fees import quote_price
from apps.cores.utils.file_validation import validate_image_upload
from apps.services.models import Service
from apps.users.models import Mode
from apps.users.serializers import ProfileSummarySerializer
from .models import Job
from .services.lifecycle import available_actions

User = get_user_model()


def _file_url(field):
    return field.url if field else None


class JobListSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source="customer.profile.full_name", read_only=True)
    freelancer_name = serializers.SerializerMethodField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Job
        fields = [
            "id",
            "title",
            "status",
            "payment_status",
            "base_price",
            "fee_amount",
            "total",
            "customer_name",
            "freelancer_name",
            "rating",
            "created_at",
        ]
        read_only_fields = fields

    def get_freelancer_name(self, obj):
        if not obj.freelancer_id:
            return None
        return obj.freelancer.profile.full_name


class JobDetailSerializer(serializers.ModelSerializer):
    customer = ProfileSummarySerializer(source="customer.profile", read_only=True)
    freelancer = serializers.SerializerMethodField()
    payment = serializers.SerializerMethodField()
    submit_photo_url = serializers.SerializerMethodField()
    payment_slip_url = serializers.SerializerMethodField()
    actions = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = [
            "id",
            "title",
            "description",
            "service",
            "location_from",
            "location_to",
            "status",
            "payment_status",
            "rating",
            "customer",
            "freelancer",
            "payment",
            "submit_photo_url",
            "payment_slip_url",
            "actions",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_freelancer(self, obj):
        if not obj.freelancer_id:
            return None
        return ProfileSummarySerializer(obj.freelancer.profile).data

    def get_payment(self, obj):
        # stored fee wins over a fresh quote
        quote = quote_price(obj.base_price)
        quote["fee_amount"] = obj.fee_amount
        quote["total"] = obj.total
        return quote

    def get_submit_photo_url(self, obj):
        return _file_url(obj.submit_photo)

    def get_payment_slip_url(self, obj):
        return _file_url(obj.payment_slip)

    def get_actions(self, obj):
        request = self.context.get("request")
        if request is None:
            return []
        return available_actions(obj, request.user)


class JobCreateSerializer(serializers.ModelSerializer):
    freelancer = serializers.PrimaryKeyRelatedField(
        queryset=User.objects.filter(is_active=True),
        error_messages={
            "required": "กรุณาเลือกช่าง",
            "null": "กรุณาเลือกช่าง",
            "does_not_exist": "ไม่พบช่างที่เลือก",
        },
    )
    service = serializers.PrimaryKeyRelatedField(
        queryset=Service.objects.all(),
        required=False,
        allow_null=True,
    )
    title = serializers.CharField(
        max_length=255,
        error_messages={"required": "กรุณาใส่ชื่องาน", "blank": "กรุณาใส่ชื่องาน"},
    )
    base_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        error_messages={"required": "กรุณาใส่ราคาค่าจ้าง", "invalid": "กรุณาใส่ราคาค่าจ้าง"},
    )
    submit_photo = serializers.FileField(required=False, allow_null=True)

    class Meta:
        model = Job
        fields = [
            "id",
            "title",
            "description",
            "base_price",
            "fee_amount",
            "freelancer",
            "service",
            "location_from",
            "location_to",
            "submit_photo",
        ]
        read_only_fields = ["id", "fee_amount"]

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("กรุณาใส่ชื่องาน")
        return value.strip()

    def validate_base_price(self, value):
        if value <= Decimal("0"):
            raise serializers.ValidationError("กรุณาใส่ราคาค่าจ้าง")
        return value

    def validate_freelancer(self, value):
        request = self.context["request"]
        if value.id == request.user.id:
            raise serializers.ValidationError("ไม่สามารถจ้างงานตัวเองได้")
        if value.profile.mode != Mode.FREELANCER:
            raise serializers.ValidationError("ผู้ใช้นี้ไม่ได้เปิดรับงานในโหมดช่าง")
        return value

    def validate_submit_photo(self, value):
        if value is None:
            return value
        return validate_image_upload(value)

    def validate(self, attrs):
        service = attrs.get("service")
        if service is not None and service.provider_id != attrs["freelancer"].id:
            raise serializers.ValidationError({"service": "บริการนี้ไม่ใช่ของช่างที่เลือก"})
        return attrs


class PaymentSlipSerializer(serializers.Serializer):
    payment_slip = serializers.FileField(error_messages={"required": "กรุณาเลือกไฟล์สลิป"})

    def validate_payment_slip(self, value):
        return validate_image_upload(value)


class RatingSerializer(serializers.Serializer):
    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            "min_value": "คะแนนต้องอยู่ระหว่าง 1-5",
            "max_value": "คะแนนต้องอยู่ระหว่าง 1-5",
        },
    )
