from decimal import Decimal

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils import timezone

from apps.cores.constants import id_card_upload_path, selfie_upload_path


class Role(models.TextChoices):
    CUSTOMER = "customer", "ลูกค้า"
    FREELANCER = "freelancer", "ช่าง/ฟรีแลนซ์"
    ADMIN = "admin", "Admin"


class Mode(models.TextChoices):
    CUSTOMER = "customer", "โหมดลูกค้า"
    FREELANCER = "freelancer", "โหมดช่าง"


class KycStatus(models.TextChoices):
    NONE = "none", "ยังไม่ยื่น KYC"
    PENDING = "pending", "รอ Admin ตรวจสอบ"
    APPROVED = "approved", "ผ่านการยืนยันแล้ว"
    REJECTED = "rejected", "ไม่ผ่าน กรุณายื่นใหม่"


SKILL_OPTIONS = [
    'ช่างไฟ', 'ช่างประปา', 'ช่างไม้', 'ช่างเชื่อม', 'ช่างทาสี',
    'แม่บ้าน', 'ทำสวน', 'ซ่อมเรือ', 'ประมง', 'เกษตร',
    'ขับรถ', 'ส่งของ', 'ทำอาหาร', 'นวดแผนไทย', 'ดูแลผู้สูงอายุ',
    'สอนพิเศษ', 'ภาษาอังกฤษ', 'คอมพิวเตอร์', 'ช่างภาพ', 'รับจ้างทั่วไป',
]


class UserManager(BaseUserManager):
    """Custom user manager supporting email authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")

        email = self.normalize_email(email).lower()
        extra_fields.setdefault("username", email)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", Role.ADMIN)  # Force admin role

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    email = models.EmailField(unique=True, db_index=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CUSTOMER)
    created_at = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        db_table = "users"
        indexes = [
            models.Index(fields=["role", "is_active"], name="users_role_active_idx"),
        ]

    def __str__(self):
        return f"{self.email} ({self.role})"

    def has_admin_access(self):
        return self.role == Role.ADMIN and self.is_staff


class Profile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")

    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=20, blank=True)
    location = models.CharField(max_length=255, blank=True)
    bio = models.TextField(blank=True, null=True)
    skills = models.JSONField(default=list, blank=True)

    mode = models.CharField(max_length=20, choices=Mode.choices, default=Mode.CUSTOMER)

    # KYC
    kyc_status = models.CharField(max_length=20, choices=KycStatus.choices, default=KycStatus.NONE)
    is_verified = models.BooleanField(default=False)
    id_card = models.FileField(upload_to=id_card_upload_path, blank=True, null=True)
    selfie_with_id = models.FileField(upload_to=selfie_upload_path, blank=True, null=True)
    bank_account_number = models.CharField(max_length=50, blank=True, null=True)
    bank_name = models.CharField(max_length=100, blank=True, null=True)

    # Aggregates, maintained by apps.jobs.signals
    avg_rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0.00"))
    total_jobs = models.PositiveIntegerField(default=0)
    spending_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    earning_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    lottery_count_this_month = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "profiles"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["mode"], name="profiles_mode_idx"),
            models.Index(fields=["-avg_rating"], name="profiles_rating_idx"),
        ]

    def __str__(self):
        return f"Profile: {self.full_name} ({self.mode})"

    @property
    def is_freelancer_mode(self):
        return self.mode == Mode.FREELANCER

    @property
    def can_submit_kyc(self):
        return self.kyc_status in (KycStatus.NONE, KycStatus.REJECTED)

    def dashboard_path(self):
        if self.mode == Mode.FREELANCER:
            return "/dashboard/freelancer"
        return "/dashboard/customer"
