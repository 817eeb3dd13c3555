from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.cores.testing import make_user
from apps.notifications.models import Notification, NotificationType
from apps.users.models import User, Profile, KycStatus


class KycReviewAPITest(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(email="admin@example.com", password="secret123")
        self.applicant = make_user("buyer@example.com", kyc_status=KycStatus.PENDING)
        self.client.force_authenticate(self.admin)

    def review(self, decision, **extra):
        return self.client.post(
            reverse("admin-review-kyc", args=[self.applicant.id]),
            {"decision": decision, **extra},
            format="json",
        )

    def test_pending_queue(self):
        make_user("idle@example.com")
        response = self.client.get(reverse("admin-kyc-pending"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["email"] for row in response.data], ["buyer@example.com"])

    def test_approve(self):
        response = self.review("approve")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        profile = Profile.objects.get(user=self.applicant)
        self.assertEqual(profile.kyc_status, KycStatus.APPROVED)
        self.assertTrue(profile.is_verified)

        notif = Notification.objects.get(recipient=self.applicant)
        self.assertEqual(notif.notif_type, NotificationType.SYSTEM)

    def test_reject_with_reason(self):
        response = self.review("reject", reason="รูปไม่ชัด")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Profile.objects.get(user=self.applicant).kyc_status, KycStatus.REJECTED)
        self.assertIn("รูปไม่ชัด", Notification.objects.get(recipient=self.applicant).body)

    def test_nothing_to_review(self):
        Profile.objects.filter(user=self.applicant).update(kyc_status=KycStatus.NONE)
        response = self.review("approve")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Notification.objects.exists())

    def test_non_admin_forbidden(self):
        self.client.force_authenticate(self.applicant)
        self.assertEqual(self.review("approve").status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(
            self.client.get(reverse("admin-kyc-pending")).status_code,
            status.HTTP_403_FORBIDDEN,
        )


class AdminUserAPITest(APITestCase):
    def setUp(self):
        self.admin = User.objects.create_superuser(email="admin@example.com", password="secret123")
        self.client.force_authenticate(self.admin)

    def test_toggle_block(self):
        user = make_user("buyer@example.com")
        response = self.client.post(reverse("toggle-block"), {"user_id": user.id}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["is_active"])
        user.refresh_from_db()
        self.assertFalse(user.is_active)

    def test_user_list_filters_by_role(self):
        make_user("buyer@example.com")
        response = self.client.get(reverse("admin-users"), {"role": "customer"})
        self.assertEqual([row["email"] for row in response.data], ["buyer@example.com"])
