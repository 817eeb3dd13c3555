import logging

from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, permissions, status
from rest_framework.response import Response

from apps.users.permissions import IsFreelancerMode
from .filters import ServiceFilter, SORT_ORDERINGS
from .models import Service
from .serializers import ServiceSerializer

logger = logging.getLogger(__name__)


class ServiceMarketplaceView(generics.ListAPIView):
    """
    Public marketplace: filter with ?category=, sort with ?sort=rating|price_asc|price_desc|jobs.
    """
    serializer_class = ServiceSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ServiceFilter

    def get_queryset(self):
        return (
            Service.objects
            .select_related("provider", "provider__profile")
            .filter(provider__is_active=True)
            .order_by(*SORT_ORDERINGS["rating"])
        )


class MyServiceListCreateView(generics.ListCreateAPIView):
    serializer_class = ServiceSerializer
    permission_classes = [permissions.IsAuthenticated, IsFreelancerMode]

    def get_queryset(self):
        return Service.objects.filter(provider=self.request.user).order_by("-created_at")

    def perform_create(self, serializer):
        service = serializer.save(provider=self.request.user)
        logger.info("Service %s created by %s", service.id, self.request.user.id)


class MyServiceDetailView(generics.RetrieveDestroyAPIView):
    serializer_class = ServiceSerializer
    permission_classes = [permissions.IsAuthenticated, IsFreelancerMode]

    def get_queryset(self):
        return Service.objects.filter(provider=self.request.user)

    def destroy(self, request, *args, **kwargs):
        service = get_object_or_404(self.get_queryset(), pk=kwargs["pk"])
        service.delete()
        logger.info("Service %s deleted by %s", kwargs["pk"], request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)
