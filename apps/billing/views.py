from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import serializers

from .serializers import FeeQuoteSerializer


class FeeQuoteView(APIView):
    """
    Live fee preview for price inputs (job form, service form).
    """
    permission_classes = [AllowAny]

    def get(self, request):
        field = serializers.DecimalField(max_digits=12, decimal_places=2)
        base_price = field.run_validation(request.query_params.get("price", "0") or "0")
        return Response(FeeQuoteSerializer.build(base_price).data)
