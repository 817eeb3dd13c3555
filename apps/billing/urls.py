# billing/urls.py
from django.urls import path
from .views import FeeQuoteView

urlpatterns = [
    path("fees/quote/", FeeQuoteView.as_view(), name="fee-quote"),
]
