# billing/serializers.py
from rest_framework import serializers

from .fees import quote_price


class FeeQuoteSerializer(serializers.Serializer):
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    fee_amount = serializers.DecimalField(max_digits=12, decimal_places=0, read_only=True)
    total = serializers.DecimalField(max_digits=13, decimal_places=2, read_only=True)
    fee_rate = serializers.DecimalField(max_digits=4, decimal_places=2, read_only=True)
    display = serializers.BooleanField(read_only=True)

    @classmethod
    def build(cls, base_price):
        return cls(instance=quote_price(base_price))
