import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.users.permissions import IsCustomerMode
from .filters import JobFilter
from .models import Job
from .permissions import IsJobParty
from .serializers import (
    JobListSerializer,
    JobDetailSerializer,
    JobCreateSerializer,
    PaymentSlipSerializer,
    RatingSerializer,
)
from .services import lifecycle

logger = logging.getLogger(__name__)


def _party_jobs(user):
    return (
        Job.objects
        .select_related("customer__profile", "freelancer__profile")
        .filter(Q(customer=user) | Q(freelancer=user))
    )


class JobListCreateView(generics.ListCreateAPIView):
    """
    GET: jobs where the user is customer or freelancer (``?as_role=``, ``?status=``).
    POST: hire a freelancer; only in customer mode.
    """
    filter_backends = [DjangoFilterBackend]
    filterset_class = JobFilter

    def get_permissions(self):
        if self.request.method == "POST":
            return [permissions.IsAuthenticated(), IsCustomerMode()]
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):
        if self.request.method == "POST":
            return JobCreateSerializer
        return JobListSerializer

    def get_queryset(self):
        return _party_jobs(self.request.user).order_by("-created_at")

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        job = serializer.save(customer=request.user)
        logger.info("Job %s created by customer %s for freelancer %s", job.id, request.user.id, job.freelancer_id)

        lifecycle.announce_new_job(job)

        return Response(
            JobDetailSerializer(job, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )


class JobDetailView(generics.RetrieveAPIView):
    serializer_class = JobDetailSerializer
    permission_classes = [permissions.IsAuthenticated, IsJobParty]
    queryset = Job.objects.select_related("customer__profile", "freelancer__profile")


class JobActionView(APIView):
    """Base for POST endpoints that move a job through its lifecycle."""
    permission_classes = [permissions.IsAuthenticated]

    def get_job(self, request, pk):
        job = get_object_or_404(Job, pk=pk)
        if not job.is_party(request.user):
            raise PermissionDenied("คุณไม่มีสิทธิ์เข้าถึงงานนี้")
        return job

    def respond(self, request, job, message):
        return Response({
            "success": True,
            "message": message,
            "job": JobDetailSerializer(job, context={"request": request}).data,
        })


class JobSlipUploadView(JobActionView):

    def post(self, request, pk):
        job = self.get_job(request, pk)
        serializer = PaymentSlipSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        job = lifecycle.upload_slip(job, request.user, serializer.validated_data["payment_slip"])
        return self.respond(request, job, "อัปโหลดสลิปสำเร็จ รอช่างยืนยัน")


class JobConfirmPaymentView(JobActionView):

    def post(self, request, pk):
        job = lifecycle.confirm_payment(self.get_job(request, pk), request.user)
        return self.respond(request, job, "ยืนยันการชำระเงินแล้ว")


class JobCompleteView(JobActionView):

    def post(self, request, pk):
        job = lifecycle.mark_complete(self.get_job(request, pk), request.user)
        return self.respond(request, job, "ยืนยันงานเสร็จสิ้นแล้ว")


class JobCancelView(JobActionView):

    def post(self, request, pk):
        job = lifecycle.cancel(self.get_job(request, pk), request.user)
        return self.respond(request, job, "ยกเลิกงานแล้ว")


class JobRateView(JobActionView):

    def post(self, request, pk):
        job = self.get_job(request, pk)
        serializer = RatingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        job = lifecycle.rate(job, request.user, serializer.validated_data["rating"])
        return self.respond(request, job, "ขอบคุณสำหรับการให้คะแนน")
