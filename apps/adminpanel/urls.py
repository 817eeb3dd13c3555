from django.urls import path
from .views import AdminUserList, KycPendingList, toggle_block, admin_get_profile, admin_review_kyc

urlpatterns = [
    path("users/", AdminUserList.as_view(), name="admin-users"),
    path('toggle_block/', toggle_block, name='toggle-block'),

    path("kyc/", KycPendingList.as_view(), name="admin-kyc-pending"),
    path('profiles/<int:user_id>/', admin_get_profile, name='admin-get-profile'),
    path('profiles/<int:user_id>/kyc/', admin_review_kyc, name='admin-review-kyc'),
]
