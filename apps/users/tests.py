from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.cores.constants import MAX_IMAGE_SIZE_BYTES
from apps.cores.testing import TempMediaMixin, make_user, make_freelancer, image_upload
from apps.jobs.models import Job, JobStatus, PaymentStatus
from .milestones import tickets_crossed, milestone_progress
from .models import User, Profile, Role, Mode, KycStatus
from .tasks import reset_monthly_lottery_counts


class ProfileSignalTest(TestCase):
    def test_profile_created_with_user(self):
        user = User.objects.create_user(email="Somchai@Example.com", password="secret123", role=Role.FREELANCER)
        self.assertEqual(user.email, "somchai@example.com")
        self.assertEqual(user.profile.mode, Mode.FREELANCER)
        self.assertEqual(user.profile.kyc_status, KycStatus.NONE)

    def test_superuser_is_admin_with_profile(self):
        admin = User.objects.create_superuser(email="root@example.com", password="secret123")
        self.assertEqual(admin.role, Role.ADMIN)
        self.assertTrue(admin.has_admin_access())
        self.assertTrue(Profile.objects.filter(user=admin).exists())


class SignupLoginAPITest(APITestCase):
    def signup_payload(self, **overrides):
        payload = {
            "email": "malee@example.com",
            "password": "secret123",
            "confirm_password": "secret123",
            "full_name": "มาลี ใจดี",
            "phone": "0812345678",
            "location": "เชียงใหม่",
            "role": Role.FREELANCER,
        }
        payload.update(overrides)
        return payload

    def test_signup_creates_user_and_profile(self):
        response = self.client.post(reverse("signup"), self.signup_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        user = User.objects.get(email="malee@example.com")
        self.assertEqual(user.role, Role.FREELANCER)
        self.assertEqual(user.profile.full_name, "มาลี ใจดี")
        self.assertEqual(user.profile.mode, Mode.FREELANCER)
        self.assertIn("access", response.data["data"])
        self.assertEqual(response.data["data"]["redirect_to"], "/dashboard/freelancer")

    def test_short_password_rejected(self):
        response = self.client.post(
            reverse("signup"),
            self.signup_payload(password="12345", confirm_password="12345"),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", response.data)
        self.assertFalse(User.objects.exists())

    def test_password_mismatch_rejected(self):
        response = self.client.post(
            reverse("signup"),
            self.signup_payload(confirm_password="different"),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("confirm_password", response.data)

    def test_duplicate_email_rejected(self):
        make_user("malee@example.com")
        response = self.client.post(reverse("signup"), self.signup_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_login_returns_tokens_and_dashboard(self):
        make_user("buyer@example.com")
        response = self.client.post(
            reverse("login"),
            {"email": "buyer@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("refresh", response.data["data"])
        self.assertEqual(response.data["data"]["redirect_to"], "/dashboard/customer")

    def test_login_wrong_password(self):
        make_user("buyer@example.com")
        response = self.client.post(
            reverse("login"),
            {"email": "buyer@example.com", "password": "nope"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ProfileAPITest(APITestCase):
    def setUp(self):
        self.user = make_user("buyer@example.com")
        self.client.force_authenticate(self.user)

    def test_requires_login(self):
        self.client.force_authenticate(None)
        response = self.client.get(reverse("profile"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_edit_profile(self):
        response = self.client.patch(
            reverse("profile"),
            {"bio": "  รับซ่อมทุกอย่าง  ", "skills": ["ช่างไฟ", "ช่างไม้", "ช่างไฟ"], "phone": "081-234-5678"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.profile.refresh_from_db()
        self.assertEqual(self.user.profile.bio, "รับซ่อมทุกอย่าง")
        self.assertEqual(self.user.profile.skills, ["ช่างไฟ", "ช่างไม้"])

    def test_unknown_skill_rejected(self):
        response = self.client.patch(reverse("profile"), {"skills": ["นักบินอวกาศ"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_mode_is_read_only_on_profile(self):
        self.client.patch(reverse("profile"), {"mode": Mode.FREELANCER}, format="json")
        self.user.profile.refresh_from_db()
        self.assertEqual(self.user.profile.mode, Mode.CUSTOMER)


class ModeSwitchAPITest(APITestCase):
    def setUp(self):
        self.user = make_user("buyer@example.com")
        self.client.force_authenticate(self.user)

    def test_switch_to_freelancer_requires_kyc(self):
        response = self.client.post(reverse("profile-mode"), {"mode": Mode.FREELANCER}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"].code, "kyc_required")
        self.user.profile.refresh_from_db()
        self.assertEqual(self.user.profile.mode, Mode.CUSTOMER)

    def test_switch_after_kyc_submitted(self):
        Profile.objects.filter(user=self.user).update(kyc_status=KycStatus.PENDING)
        response = self.client.post(reverse("profile-mode"), {"mode": Mode.FREELANCER}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["redirect_to"], "/dashboard/freelancer")

    def test_same_mode_is_noop(self):
        response = self.client.post(reverse("profile-mode"), {"mode": Mode.CUSTOMER}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["mode"], Mode.CUSTOMER)


class KycSubmitAPITest(TempMediaMixin, APITestCase):
    def setUp(self):
        self.user = make_user("buyer@example.com")
        self.client.force_authenticate(self.user)

    def payload(self, **overrides):
        data = {
            "bank_account_number": "123-4-56789-0",
            "id_card": image_upload("card.jpg", content_type="image/jpeg"),
            "selfie_with_id": image_upload("selfie.png"),
        }
        data.update(overrides)
        return data

    def test_submit_sets_pending(self):
        response = self.client.post(reverse("profile-kyc"), self.payload(), format="multipart")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        profile = Profile.objects.get(user=self.user)
        self.assertEqual(profile.kyc_status, KycStatus.PENDING)
        self.assertEqual(profile.bank_name, "ไม่ระบุ")
        self.assertTrue(profile.id_card.name.startswith(f"kyc/{self.user.id}/id_card-"))

    def test_oversized_image_rejected(self):
        big = image_upload("card.png", size=MAX_IMAGE_SIZE_BYTES + 1)
        response = self.client.post(reverse("profile-kyc"), self.payload(id_card=big), format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Profile.objects.get(user=self.user).kyc_status, KycStatus.NONE)

    def test_wrong_file_type_rejected(self):
        pdf = image_upload("card.pdf", content_type="application/pdf")
        response = self.client.post(reverse("profile-kyc"), self.payload(id_card=pdf), format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_resubmit_while_pending(self):
        Profile.objects.filter(user=self.user).update(kyc_status=KycStatus.PENDING)
        response = self.client.post(reverse("profile-kyc"), self.payload(), format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class MilestoneTest(TestCase):
    def test_tickets_crossed(self):
        self.assertEqual(tickets_crossed(Decimal("2900"), Decimal("3100"), Decimal("3000")), 1)
        self.assertEqual(tickets_crossed(Decimal("0"), Decimal("6500"), Decimal("3000")), 2)
        self.assertEqual(tickets_crossed(Decimal("3100"), Decimal("3200"), Decimal("3000")), 0)
        self.assertEqual(tickets_crossed(Decimal("100"), Decimal("100"), Decimal("3000")), 0)

    def test_progress_follows_mode(self):
        customer = make_user("buyer@example.com", spending_total=Decimal("1200"))
        progress = milestone_progress(customer.profile)
        self.assertEqual(progress["money"]["goal"], Decimal("3000"))
        self.assertEqual(progress["money"]["remaining"], Decimal("1800"))
        self.assertEqual(progress["money"]["percent"], 40)

        freelancer = make_freelancer("fixer@example.com", earning_total=Decimal("7000"))
        progress = milestone_progress(freelancer.profile)
        self.assertEqual(progress["money"]["goal"], Decimal("5000"))
        self.assertEqual(progress["money"]["remaining"], 0)
        self.assertEqual(progress["money"]["percent"], 100)


class DashboardAPITest(APITestCase):
    def setUp(self):
        self.customer = make_user("buyer@example.com")
        self.freelancer = make_freelancer("fixer@example.com")
        for i in range(7):
            Job.objects.create(
                customer=self.customer,
                freelancer=self.freelancer,
                title=f"งาน {i}",
                base_price=Decimal("100"),
            )

    def test_unified_dashboard_shows_five_recent(self):
        self.client.force_authenticate(self.customer)
        response = self.client.get(reverse("dashboard"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["recent_jobs"]), 5)
        self.assertIn("milestones", response.data)

    def test_mode_dashboards_are_gated(self):
        self.client.force_authenticate(self.customer)
        self.assertEqual(self.client.get(reverse("dashboard-customer")).status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(reverse("dashboard-freelancer")).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.freelancer)
        response = self.client.get(reverse("dashboard-freelancer"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["jobs"]), 7)


class CertificateAPITest(APITestCase):
    def test_certificate_criteria(self):
        freelancer = make_freelancer("fixer@example.com", total_jobs=6, avg_rating=Decimal("4.50"))
        customer = make_user("buyer@example.com")
        Job.objects.create(
            customer=customer,
            freelancer=freelancer,
            title="เดินสายไฟ",
            base_price=Decimal("500"),
            status=JobStatus.COMPLETED,
            payment_status=PaymentStatus.PAID,
        )

        self.client.force_authenticate(freelancer)
        response = self.client.get(reverse("profile-certificate"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["meets_portfolio_criteria"])
        self.assertTrue(response.data["meets_certificate_criteria"])
        self.assertEqual(len(response.data["completed_jobs"]), 1)
        self.assertEqual(response.data["verify_path"], f"/verify/{freelancer.profile.id}")

    def test_new_freelancer_not_eligible(self):
        freelancer = make_freelancer("fresh@example.com")
        self.client.force_authenticate(freelancer)
        response = self.client.get(reverse("profile-certificate"))
        self.assertFalse(response.data["meets_portfolio_criteria"])
        self.assertFalse(response.data["meets_certificate_criteria"])


class BrowseFreelancersAPITest(APITestCase):
    def test_only_freelancer_mode_sorted_by_rating(self):
        make_freelancer("low@example.com", avg_rating=Decimal("3.00"))
        make_freelancer("high@example.com", avg_rating=Decimal("4.90"))
        customer = make_user("buyer@example.com")

        self.client.force_authenticate(customer)
        response = self.client.get(reverse("freelancers"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [row["full_name"] for row in response.data]
        self.assertEqual(names, ["high", "low"])


class LotteryResetTaskTest(TestCase):
    def test_reset_clears_counts(self):
        make_user("a@example.com", lottery_count_this_month=3)
        make_user("b@example.com")
        self.assertEqual(reset_monthly_lottery_counts(), 1)
        self.assertFalse(Profile.objects.filter(lottery_count_this_month__gt=0).exists())
