from django.contrib import admin
from .models import Job


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "customer", "freelancer", "base_price", "fee_amount", "status", "payment_status")
    list_filter = ("status", "payment_status")
    search_fields = ("title", "customer__email", "freelancer__email")
    readonly_fields = ("fee_amount", "created_at", "updated_at")
