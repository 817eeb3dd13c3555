from django.contrib import admin
from .models import User, Profile


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("email", "role", "is_active", "is_staff", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("email",)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("full_name", "user", "mode", "kyc_status", "avg_rating", "total_jobs")
    list_filter = ("mode", "kyc_status", "is_verified")
    search_fields = ("full_name", "user__email", "phone")
