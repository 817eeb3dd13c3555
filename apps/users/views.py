import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.cores.exceptions import KycRequired
from apps.jobs.models import Job, JobStatus
from apps.jobs.serializers import JobListSerializer
from .milestones import milestone_progress
from .models import Profile, Mode, KycStatus, SKILL_OPTIONS
from .permissions import IsCustomerMode, IsFreelancerMode
from .serializers import (
    RegisterSerializer,
    LoginSerializer,
    ProfileSerializer,
    ProfileSummarySerializer,
    ModeSwitchSerializer,
    KycSubmitSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


# -------- Signup --------
class RegisterView(generics.GenericAPIView):
    """
    Creates the account and its profile in one step and logs the user in.
    """
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user %s as %s", user.id, user.role)

        login = LoginSerializer(data={
            "email": user.email,
            "password": serializer.validated_data["password"],
        })
        login.is_valid(raise_exception=True)

        return Response(
            {
                "success": True,
                "message": "สมัครสมาชิกสำเร็จ",
                "data": login.validated_data,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(generics.GenericAPIView):
    """
    Login using email and password.
    Returns access and refresh JWT tokens and where to land.
    """
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(
            {
                "success": True,
                "message": "เข้าสู่ระบบสำเร็จ",
                "data": serializer.validated_data,
            },
            status=status.HTTP_200_OK,
        )


# -------- Profile --------
class ProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = ProfileSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "patch", "put"]

    def get_object(self):
        return self.request.user.profile


class SkillOptionsView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(SKILL_OPTIONS)


class ModeSwitchView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ModeSwitchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_mode = serializer.validated_data["mode"]
        profile = request.user.profile

        if new_mode != profile.mode:
            if new_mode == Mode.FREELANCER and profile.kyc_status == KycStatus.NONE:
                raise KycRequired()
            profile.mode = new_mode
            profile.save(update_fields=["mode", "updated_at"])
            logger.info("User %s switched to %s mode", request.user.id, new_mode)

        return Response({
            "mode": profile.mode,
            "redirect_to": profile.dashboard_path(),
        })


class KycSubmitView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        profile = request.user.profile
        serializer = KycSubmitSerializer(profile, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("KYC submitted by user %s", request.user.id)

        return Response(
            {
                "success": True,
                "message": "ส่ง KYC สำเร็จ! รอ Admin ตรวจสอบ",
                "kyc_status": profile.kyc_status,
            },
            status=status.HTTP_200_OK,
        )


class CertificateView(APIView):
    """
    Work portfolio / certificate data for the logged-in freelancer.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        profile = request.user.profile
        completed = (
            Job.objects
            .filter(freelancer=request.user, status=JobStatus.COMPLETED)
            .order_by("-created_at")[:10]
        )

        return Response({
            "profile": ProfileSerializer(profile).data,
            "completed_jobs": JobListSerializer(completed, many=True).data,
            "meets_portfolio_criteria": profile.total_jobs >= 1,
            "meets_certificate_criteria": profile.total_jobs >= 5 and profile.avg_rating >= 4,
            "verify_path": f"/verify/{profile.id}",
        })


# -------- Dashboards --------
class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        profile = request.user.profile
        recent_jobs = (
            Job.objects
            .filter(Q(customer=request.user) | Q(freelancer=request.user))
            .order_by("-created_at")[:5]
        )

        return Response({
            "profile": ProfileSerializer(profile).data,
            "mode": profile.mode,
            "recent_jobs": JobListSerializer(recent_jobs, many=True).data,
            "milestones": milestone_progress(profile),
        })


class CustomerDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsCustomerMode]

    def get(self, request):
        jobs = Job.objects.filter(customer=request.user).order_by("-created_at")
        return Response({
            "profile": ProfileSerializer(request.user.profile).data,
            "jobs": JobListSerializer(jobs, many=True).data,
            "milestones": milestone_progress(request.user.profile),
        })


class FreelancerDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsFreelancerMode]

    def get(self, request):
        jobs = Job.objects.filter(freelancer=request.user).order_by("-created_at")
        return Response({
            "profile": ProfileSerializer(request.user.profile).data,
            "jobs": JobListSerializer(jobs, many=True).data,
            "milestones": milestone_progress(request.user.profile),
        })


class BrowseFreelancers(generics.ListAPIView):
    serializer_class = ProfileSummarySerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return (
            Profile.objects
            .select_related("user")
            .filter(mode=Mode.FREELANCER, user__is_active=True)
            .order_by("-avg_rating", "-total_jobs")
        )
