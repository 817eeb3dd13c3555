from django.contrib import admin
from .models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("title", "provider", "category", "price_thb", "created_at")
    list_filter = ("category",)
    search_fields = ("title", "provider__email")
