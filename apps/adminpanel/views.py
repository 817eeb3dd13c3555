import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.filters import SearchFilter, OrderingFilter
from rest_framework.generics import ListAPIView
from rest_framework.response import Response

from apps.notifications.models import NotificationType
from apps.notifications.services.create_notifications import notify_user_safely
from apps.users.models import Profile, KycStatus
from apps.users.permissions import IsAdminRole
from apps.users.serializers import AdminProfileSerializer
from .serializers import AdminUserSerializer, KycDecisionSerializer

logger = logging.getLogger(__name__)
User = get_user_model()


class AdminUserList(ListAPIView):
    serializer_class = AdminUserSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ["role", "is_active"]
    search_fields = ["email", "profile__full_name"]
    ordering_fields = ["date_joined", "id", "email"]

    def get_queryset(self):
        return User.objects.select_related("profile").order_by("-date_joined")


class KycPendingList(ListAPIView):
    """Profiles waiting for an admin to look at their documents, oldest first."""
    serializer_class = AdminProfileSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        return (
            Profile.objects
            .select_related("user")
            .filter(kyc_status=KycStatus.PENDING)
            .order_by("updated_at")
        )


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsAdminRole])
def toggle_block(request):
    user_id = request.data.get("user_id")
    if not user_id:
        return Response({"error": "user_id is required"}, status=400)

    user = get_object_or_404(User, id=user_id)

    # Flip the current state
    user.is_active = not user.is_active
    user.save(update_fields=["is_active"])

    status_text = "unblocked" if user.is_active else "blocked"
    logger.info("Admin %s %s user %s", request.user.id, status_text, user.id)

    return Response({
        "message": f"User {status_text} successfully",
        "user_id": user.id,
        "is_active": user.is_active
    })


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated, IsAdminRole])
def admin_get_profile(request, user_id):
    profile = get_object_or_404(Profile.objects.select_related("user"), user__id=user_id)
    serializer = AdminProfileSerializer(profile)
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated, IsAdminRole])
def admin_review_kyc(request, user_id):
    profile = get_object_or_404(Profile.objects.select_related("user"), user__id=user_id)

    serializer = KycDecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    if profile.kyc_status != KycStatus.PENDING:
        return Response({"detail": "ไม่มีคำขอ KYC ที่รอตรวจสอบ"}, status=status.HTTP_400_BAD_REQUEST)

    approved = serializer.validated_data["decision"] == KycDecisionSerializer.APPROVE
    profile.kyc_status = KycStatus.APPROVED if approved else KycStatus.REJECTED
    profile.is_verified = approved
    profile.save(update_fields=["kyc_status", "is_verified", "updated_at"])
    logger.info("Admin %s set KYC of user %s to %s", request.user.id, user_id, profile.kyc_status)

    if approved:
        title, body = "📢 ยืนยันตัวตนสำเร็จ", "บัญชีของคุณผ่านการตรวจสอบ KYC แล้ว เริ่มรับงานได้เลย"
    else:
        reason = serializer.validated_data.get("reason", "").strip()
        title = "📢 KYC ไม่ผ่านการตรวจสอบ"
        body = "กรุณายื่นเอกสารใหม่อีกครั้ง"
        if reason:
            body += f" ({reason})"
    notify_user_safely(profile.user, NotificationType.SYSTEM, title, body, {"kyc_status": profile.kyc_status})

    return Response({
        "detail": "อัปเดตสถานะ KYC แล้ว",
        "kyc_status": profile.kyc_status,
        "is_verified": profile.is_verified,
    })
