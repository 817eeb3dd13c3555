from rest_framework import serializers

from apps.billing.fees import quote_price
from apps.users.serializers import ProfileSummarySerializer
from .models import Service, CATEGORY_EMOJI


class ServiceSerializer(serializers.ModelSerializer):
    provider = ProfileSummarySerializer(source="provider.profile", read_only=True)
    category_label = serializers.CharField(source="get_category_display", read_only=True)
    category_emoji = serializers.SerializerMethodField()
    fee_amount = serializers.SerializerMethodField()
    total = serializers.SerializerMethodField()

    class Meta:
        model = Service
        fields = [
            "id",
            "title",
            "description",
            "price_thb",
            "fee_amount",
            "total",
            "category",
            "category_label",
            "category_emoji",
            "provider",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def get_category_emoji(self, obj):
        return CATEGORY_EMOJI.get(obj.category, "🔧")

    def get_fee_amount(self, obj):
        return quote_price(obj.price_thb)["fee_amount"]

    def get_total(self, obj):
        return quote_price(obj.price_thb)["total"]

    def validate_title(self, value):
        if not value.strip():
            raise serializers.ValidationError("กรุณาใส่ชื่อบริการ")
        return value.strip()

    def validate_price_thb(self, value):
        if value <= 0:
            raise serializers.ValidationError("กรุณาใส่ราคาเริ่มต้น")
        return value
