from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone

from apps.billing.fees import calculate_fee
from apps.cores.constants import job_photo_upload_path, payment_slip_upload_path


class JobStatus(models.TextChoices):
    PENDING = "pending", "รอดำเนินการ"
    IN_PROGRESS = "in_progress", "กำลังดำเนินงาน"
    COMPLETED = "completed", "เสร็จสิ้น"
    CANCELLED = "cancelled", "ยกเลิก"


class PaymentStatus(models.TextChoices):
    UNPAID = "unpaid", "ยังไม่ชำระ"
    PENDING_CONFIRM = "pending_confirm", "รอยืนยันการชำระ"
    PAID = "paid", "ชำระแล้ว"


FINAL_STATUSES = (JobStatus.COMPLETED, JobStatus.CANCELLED)


class Job(models.Model):
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="jobs_as_customer",
    )
    freelancer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="jobs_as_freelancer",
    )
    service = models.ForeignKey(
        "services.Service",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="jobs",
    )

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    base_price = models.DecimalField(max_digits=12, decimal_places=2)
    # fixed at creation, never recomputed
    fee_amount = models.DecimalField(max_digits=12, decimal_places=0, editable=False)

    location_from = models.CharField(max_length=255, blank=True)
    location_to = models.CharField(max_length=255, blank=True)

    submit_photo = models.FileField(upload_to=job_photo_upload_path, blank=True, null=True)
    payment_slip = models.FileField(upload_to=payment_slip_upload_path, blank=True, null=True)

    status = models.CharField(max_length=20, choices=JobStatus.choices, default=JobStatus.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
    )

    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "jobs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="jobs_customer_created_idx"),
            models.Index(fields=["freelancer", "-created_at"], name="jobs_freelancer_created_idx"),
            models.Index(fields=["status"], name="jobs_status_idx"),
        ]

    def __str__(self):
        return f"Job #{self.pk}: {self.title} ({self.status})"

    def save(self, *args, **kwargs):
        if self._state.adding and self.fee_amount is None:
            self.fee_amount = calculate_fee(self.base_price)
        super().save(*args, **kwargs)

    @property
    def total(self):
        return self.base_price + self.fee_amount

    @property
    def is_final(self):
        return self.status in FINAL_STATUSES

    def is_party(self, user):
        return user.id in (self.customer_id, self.freelancer_id)
