from decimal import Decimal

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.test import TestCase, TransactionTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.cores.constants import MAX_IMAGE_SIZE_BYTES
from apps.cores.exceptions import InvalidTransition
from apps.cores.testing import TempMediaMixin, make_user, make_freelancer, image_upload
from apps.notifications.models import Notification, NotificationType
from apps.notifications.services.create_notifications import notify_user
from apps.services.models import Service
from apps.users.models import Profile
from .models import Job, JobStatus, PaymentStatus
from .services import lifecycle


def make_job(customer, freelancer, base_price="350", **fields):
    return Job.objects.create(
        customer=customer,
        freelancer=freelancer,
        title=fields.pop("title", "ซ่อมปลั๊กไฟ"),
        base_price=Decimal(base_price),
        **fields,
    )


class JobModelTest(TestCase):
    def setUp(self):
        self.customer = make_user("buyer@example.com")
        self.freelancer = make_freelancer("fixer@example.com")

    def test_fee_stored_on_create(self):
        job = make_job(self.customer, self.freelancer, "350")
        job.refresh_from_db()
        self.assertEqual(job.fee_amount, Decimal("11"))
        self.assertEqual(job.total, Decimal("361"))

    def test_fee_not_recomputed_on_price_edit(self):
        job = make_job(self.customer, self.freelancer, "1000")
        job.base_price = Decimal("2000")
        job.save()
        job.refresh_from_db()
        self.assertEqual(job.fee_amount, Decimal("30"))


class LifecycleTest(TempMediaMixin, TestCase):
    def setUp(self):
        self.customer = make_user("buyer@example.com", full_name="สมศรี")
        self.freelancer = make_freelancer("fixer@example.com", full_name="สมชาย")
        self.job = make_job(self.customer, self.freelancer, "1000")

    def test_happy_path(self):
        job = lifecycle.upload_slip(self.job, self.customer, image_upload("slip.png"))
        self.assertEqual(job.payment_status, PaymentStatus.PENDING_CONFIRM)

        job = lifecycle.confirm_payment(job, self.freelancer)
        self.assertEqual(job.payment_status, PaymentStatus.PAID)
        self.assertEqual(job.status, JobStatus.IN_PROGRESS)

        job = lifecycle.mark_complete(job, self.customer)
        self.assertEqual(job.status, JobStatus.COMPLETED)

        job = lifecycle.rate(job, self.customer, 5)
        self.assertEqual(job.rating, 5)

        kinds = list(
            Notification.objects.order_by("id").values_list("recipient__email", "notif_type")
        )
        self.assertEqual(kinds, [
            ("fixer@example.com", NotificationType.PAYMENT),
            ("buyer@example.com", NotificationType.PAYMENT),
            ("fixer@example.com", NotificationType.JOB_COMPLETED),
            ("fixer@example.com", NotificationType.RATING),
        ])

    def test_slip_notification_carries_total(self):
        lifecycle.upload_slip(self.job, self.customer, image_upload("slip.png"))
        notif = Notification.objects.get(recipient=self.freelancer)
        self.assertIn("฿1,030", notif.body)
        self.assertEqual(notif.data, {"job_id": self.job.id})

    def test_confirm_without_slip_is_invalid(self):
        with self.assertRaises(InvalidTransition):
            lifecycle.confirm_payment(self.job, self.freelancer)

    def test_complete_before_payment_is_invalid(self):
        with self.assertRaises(InvalidTransition):
            lifecycle.mark_complete(self.job, self.customer)

    def test_no_transition_out_of_cancelled(self):
        lifecycle.cancel(self.job, self.customer)
        for action in (
            lambda: lifecycle.upload_slip(self.job, self.customer, image_upload()),
            lambda: lifecycle.cancel(self.job, self.customer),
            lambda: lifecycle.mark_complete(self.job, self.customer),
        ):
            with self.assertRaises(InvalidTransition):
                action()
        self.job.refresh_from_db()
        self.assertEqual(self.job.status, JobStatus.CANCELLED)

    def test_rate_only_once(self):
        Job.objects.filter(pk=self.job.pk).update(status=JobStatus.COMPLETED)
        lifecycle.rate(self.job, self.customer, 4)
        with self.assertRaises(InvalidTransition):
            lifecycle.rate(self.job, self.customer, 5)

    def test_available_actions(self):
        self.assertEqual(lifecycle.available_actions(self.job, self.customer), ["upload_slip", "cancel"])
        self.assertEqual(lifecycle.available_actions(self.job, self.freelancer), [])


class CountersTest(TestCase):
    def setUp(self):
        self.customer = make_user("buyer@example.com", spending_total=Decimal("2500"))
        self.freelancer = make_freelancer("fixer@example.com", earning_total=Decimal("4800"))

    def complete(self, job):
        Job.objects.filter(pk=job.pk).update(
            status=JobStatus.IN_PROGRESS,
            payment_status=PaymentStatus.PAID,
        )
        return lifecycle.mark_complete(job, self.customer)

    def test_completion_updates_totals_and_awards_lottery(self):
        self.complete(make_job(self.customer, self.freelancer, "1000"))

        customer = Profile.objects.get(user=self.customer)
        self.assertEqual(customer.total_jobs, 1)
        self.assertEqual(customer.spending_total, Decimal("3530"))
        self.assertEqual(customer.lottery_count_this_month, 1)

        freelancer = Profile.objects.get(user=self.freelancer)
        self.assertEqual(freelancer.total_jobs, 1)
        self.assertEqual(freelancer.earning_total, Decimal("5800"))
        self.assertEqual(freelancer.lottery_count_this_month, 1)

        self.assertEqual(
            Notification.objects.filter(notif_type=NotificationType.LOTTERY).count(), 2
        )

    def test_small_job_awards_nothing(self):
        self.complete(make_job(self.customer, self.freelancer, "100"))
        self.assertEqual(Profile.objects.get(user=self.customer).lottery_count_this_month, 0)
        self.assertFalse(Notification.objects.filter(notif_type=NotificationType.LOTTERY).exists())

    def test_rating_average(self):
        for rating in (5, 4):
            job = make_job(self.customer, self.freelancer, "100", status=JobStatus.COMPLETED)
            lifecycle.rate(job, self.customer, rating)
        self.assertEqual(Profile.objects.get(user=self.freelancer).avg_rating, Decimal("4.50"))


class CompletionRollbackTest(TransactionTestCase):
    def setUp(self):
        self.customer = make_user("buyer@example.com")
        self.freelancer = make_freelancer("fixer@example.com")
        self.job = make_job(
            self.customer, self.freelancer, "3500",
            status=JobStatus.IN_PROGRESS, payment_status=PaymentStatus.PAID,
        )
        self.layer = get_channel_layer()
        self.group_name = f"user_{self.customer.id}"
        self.channel = async_to_sync(self.layer.new_channel)()
        async_to_sync(self.layer.group_add)(self.group_name, self.channel)

    def tearDown(self):
        async_to_sync(self.layer.group_discard)(self.group_name, self.channel)

    def test_failed_completion_pushes_no_lottery_event(self):
        # the freelancer side of the counters fails after the customer crossed a milestone
        Profile.objects.filter(user=self.freelancer).delete()

        with self.assertRaises(Profile.DoesNotExist):
            lifecycle.mark_complete(self.job, self.customer)

        self.job.refresh_from_db()
        self.assertEqual(self.job.status, JobStatus.IN_PROGRESS)
        self.assertFalse(Notification.objects.filter(notif_type=NotificationType.LOTTERY).exists())
        self.assertEqual(Profile.objects.get(user=self.customer).lottery_count_this_month, 0)

        kept = notify_user(self.customer, NotificationType.SYSTEM, "📢 ระบบ")
        event = async_to_sync(self.layer.receive)(self.channel)
        self.assertEqual(event["id"], kept.id)


class JobAPITest(TempMediaMixin, APITestCase):
    def setUp(self):
        self.customer = make_user("buyer@example.com", full_name="สมศรี")
        self.freelancer = make_freelancer("fixer@example.com", full_name="สมชาย")
        self.stranger = make_user("other@example.com")

    def create_job(self, **overrides):
        payload = {
            "title": "ซ่อมก๊อกน้ำ",
            "description": "ก๊อกรั่วในครัว",
            "base_price": "350",
            "freelancer": self.freelancer.id,
            "location_from": "บ้านเลขที่ 9",
        }
        payload.update(overrides)
        self.client.force_authenticate(self.customer)
        return self.client.post(reverse("job-list"), payload, format="multipart")

    def test_create_job(self):
        response = self.create_job(submit_photo=image_upload("leak.jpg", content_type="image/jpeg"))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["payment"]["fee_amount"], Decimal("11"))
        self.assertEqual(response.data["payment"]["total"], Decimal("361"))

        job = Job.objects.get()
        self.assertEqual(job.fee_amount, Decimal("11"))
        self.assertTrue(job.submit_photo.name.startswith(f"jobs/{self.customer.id}-"))

        notif = Notification.objects.get(recipient=self.freelancer)
        self.assertEqual(notif.notif_type, NotificationType.NEW_JOB)
        self.assertIn("สมศรี", notif.body)

    def test_create_validation(self):
        response = self.create_job(title="   ")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data["title"][0]), "กรุณาใส่ชื่องาน")

        response = self.create_job(base_price="0")
        self.assertEqual(str(response.data["base_price"][0]), "กรุณาใส่ราคาค่าจ้าง")

        payload_without_freelancer = {"title": "x", "base_price": "100"}
        self.client.force_authenticate(self.customer)
        response = self.client.post(reverse("job-list"), payload_without_freelancer, format="json")
        self.assertEqual(str(response.data["freelancer"][0]), "กรุณาเลือกช่าง")

        self.assertFalse(Job.objects.exists())

    def test_cannot_hire_customer_mode_user(self):
        response = self.create_job(freelancer=self.stranger.id)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("freelancer", response.data)

    def test_service_must_belong_to_freelancer(self):
        other = make_freelancer("otherfixer@example.com")
        service = Service.objects.create(provider=other, title="ทาสีบ้าน", price_thb=Decimal("800"))
        response = self.create_job(service=service.id)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("service", response.data)

    def test_freelancer_mode_cannot_create(self):
        self.client.force_authenticate(self.freelancer)
        response = self.client.post(
            reverse("job-list"),
            {"title": "x", "base_price": "100", "freelancer": self.freelancer.id},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_only_parties_can_view(self):
        job = make_job(self.customer, self.freelancer)
        url = reverse("job-detail", args=[job.id])

        self.client.force_authenticate(self.stranger)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.freelancer)
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["actions"], [])

    def test_list_only_own_jobs(self):
        make_job(self.customer, self.freelancer)
        make_job(self.stranger, self.freelancer)

        self.client.force_authenticate(self.customer)
        response = self.client.get(reverse("job-list"))
        self.assertEqual(len(response.data), 1)

        self.client.force_authenticate(self.freelancer)
        response = self.client.get(reverse("job-list"), {"as_role": "freelancer"})
        self.assertEqual(len(response.data), 2)

    def test_slip_upload_flow(self):
        job = make_job(self.customer, self.freelancer)
        self.client.force_authenticate(self.customer)
        response = self.client.post(
            reverse("job-slip", args=[job.id]),
            {"payment_slip": image_upload("slip.webp", content_type="image/webp")},
            format="multipart",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        job.refresh_from_db()
        self.assertEqual(job.payment_status, PaymentStatus.PENDING_CONFIRM)
        self.assertTrue(job.payment_slip.name.startswith(f"slips/{job.id}-"))

        self.client.force_authenticate(self.freelancer)
        response = self.client.post(reverse("job-confirm-payment", args=[job.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["job"]["status"], JobStatus.IN_PROGRESS)

    def test_oversized_slip_rejected_before_storing(self):
        job = make_job(self.customer, self.freelancer)
        self.client.force_authenticate(self.customer)
        response = self.client.post(
            reverse("job-slip", args=[job.id]),
            {"payment_slip": image_upload("slip.png", size=MAX_IMAGE_SIZE_BYTES + 1)},
            format="multipart",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        job.refresh_from_db()
        self.assertFalse(job.payment_slip)
        self.assertEqual(job.payment_status, PaymentStatus.UNPAID)

    def test_invalid_transition_is_conflict(self):
        job = make_job(self.customer, self.freelancer)
        self.client.force_authenticate(self.customer)
        response = self.client.post(reverse("job-complete", args=[job.id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_freelancer_cannot_complete(self):
        job = make_job(self.customer, self.freelancer, status=JobStatus.IN_PROGRESS)
        self.client.force_authenticate(self.freelancer)
        response = self.client.post(reverse("job-complete", args=[job.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_rating_out_of_range(self):
        job = make_job(self.customer, self.freelancer, status=JobStatus.COMPLETED)
        self.client.force_authenticate(self.customer)
        response = self.client.post(reverse("job-rate", args=[job.id]), {"rating": 6}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
