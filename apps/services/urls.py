from django.urls import path
from .views import ServiceMarketplaceView, MyServiceListCreateView, MyServiceDetailView

urlpatterns = [
    path("services/", ServiceMarketplaceView.as_view(), name="service-marketplace"),
    path("services/manage/", MyServiceListCreateView.as_view(), name="service-manage"),
    path("services/manage/<int:pk>/", MyServiceDetailView.as_view(), name="service-manage-detail"),
]
