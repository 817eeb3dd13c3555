from django.urls import path
from .views import (
    JobListCreateView,
    JobDetailView,
    JobSlipUploadView,
    JobConfirmPaymentView,
    JobCompleteView,
    JobCancelView,
    JobRateView,
)

urlpatterns = [
    path("jobs/", JobListCreateView.as_view(), name="job-list"),
    path("jobs/<int:pk>/", JobDetailView.as_view(), name="job-detail"),
    path("jobs/<int:pk>/slip/", JobSlipUploadView.as_view(), name="job-slip"),
    path("jobs/<int:pk>/confirm-payment/", JobConfirmPaymentView.as_view(), name="job-confirm-payment"),
    path("jobs/<int:pk>/complete/", JobCompleteView.as_view(), name="job-complete"),
    path("jobs/<int:pk>/cancel/", JobCancelView.as_view(), name="job-cancel"),
    path("jobs/<int:pk>/rate/", JobRateView.as_view(), name="job-rate"),
]
