from django.conf import settings
from django.db import models
from django.utils.dateparse import parse_datetime


class NotificationType(models.TextChoices):
    NEW_JOB = "new_job", "งานใหม่"
    JOB_ACCEPTED = "job_accepted", "รับงานแล้ว"
    JOB_COMPLETED = "job_completed", "งานเสร็จแล้ว"
    PAYMENT = "payment", "การชำระเงิน"
    RATING = "rating", "รีวิว"
    LOTTERY = "lottery", "ลอตเตอรี่"
    SYSTEM = "system", "ระบบ"


class Notification(models.Model):
    """
    Per-user inbox entry. Rows are only ever flipped to read, never deleted.
    """

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications"
    )

    notif_type = models.CharField(
        max_length=20,
        choices=NotificationType.choices
    )

    title = models.CharField(max_length=255)

    body = models.TextField(blank=True)

    # Optional metadata (store IDs like job_id, amount)
    data = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "notifications"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "-created_at"], name="notif_recipient_created_idx"),
            models.Index(fields=["recipient", "is_read"], name="notif_recipient_unread_idx"),
        ]

    def __str__(self):
        return f"Notification({self.recipient_id}, {self.notif_type})"

    def as_event(self):
        """Payload pushed to the ``user_<id>`` channel group."""
        return {
            "type": "send_notification",
            "id": self.id,
            "recipient_id": self.recipient_id,
            "notif_type": self.notif_type,
            "title": self.title,
            "body": self.body,
            "data": self.data,
            "is_read": self.is_read,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_event(cls, event):
        """Rebuild an in-memory row from a channel layer event without touching the DB."""
        return cls(
            id=event["id"],
            recipient_id=event["recipient_id"],
            notif_type=event["notif_type"],
            title=event["title"],
            body=event.get("body", ""),
            data=event.get("data") or {},
            is_read=event.get("is_read", False),
            created_at=parse_datetime(event["created_at"]),
        )
