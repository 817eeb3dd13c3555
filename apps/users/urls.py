from django.urls import path
from .views import (
    RegisterView,
    LoginView,
    ProfileView,
    SkillOptionsView,
    ModeSwitchView,
    KycSubmitView,
    CertificateView,
    DashboardView,
    CustomerDashboardView,
    FreelancerDashboardView,
    BrowseFreelancers,
)


urlpatterns = [
    # Authentication & registration
    path('auth/signup/', RegisterView.as_view(), name='signup'),
    path('auth/login/', LoginView.as_view(), name='login'),

    # Profile / KYC
    path('profile/', ProfileView.as_view(), name='profile'),
    path('profile/skills/', SkillOptionsView.as_view(), name='skill-options'),
    path('profile/mode/', ModeSwitchView.as_view(), name='profile-mode'),
    path('profile/kyc/', KycSubmitView.as_view(), name='profile-kyc'),
    path('profile/certificate/', CertificateView.as_view(), name='profile-certificate'),

    # Dashboards
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('dashboard/customer/', CustomerDashboardView.as_view(), name='dashboard-customer'),
    path('dashboard/freelancer/', FreelancerDashboardView.as_view(), name='dashboard-freelancer'),

    # freelancers
    path("freelancers/", BrowseFreelancers.as_view(), name="freelancers"),
]
