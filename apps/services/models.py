from django.conf import settings
from django.db import models
from django.utils import timezone


class ServiceCategory(models.TextChoices):
    ELECTRIC = "electric", "ช่างไฟ"
    PLUMBING = "plumbing", "ช่างน้ำ"
    CARPENTER = "carpenter", "ช่างไม้"
    PAINT = "paint", "ทาสี"
    TRANSPORT = "transport", "ขนส่ง"
    GARDEN = "garden", "ตัดหญ้า"
    OTHER = "other", "อื่นๆ"


CATEGORY_EMOJI = {
    ServiceCategory.ELECTRIC: "⚡",
    ServiceCategory.PLUMBING: "🚿",
    ServiceCategory.CARPENTER: "🪚",
    ServiceCategory.PAINT: "🎨",
    ServiceCategory.TRANSPORT: "🚚",
    ServiceCategory.GARDEN: "🌿",
    ServiceCategory.OTHER: "🔧",
}


class Service(models.Model):
    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="services",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price_thb = models.DecimalField(max_digits=12, decimal_places=2)
    category = models.CharField(
        max_length=20,
        choices=ServiceCategory.choices,
        default=ServiceCategory.OTHER,
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "services"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category"], name="services_category_idx"),
            models.Index(fields=["provider"], name="services_provider_idx"),
        ]

    def __str__(self):
        return f"Service: {self.title} by {self.provider_id}"
