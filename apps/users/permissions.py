from rest_framework.permissions import BasePermission

from .models import Mode, Role


def _profile(user):
    return getattr(user, "profile", None)


class IsCustomerMode(BasePermission):
    message = "เฉพาะโหมดลูกค้าเท่านั้น"

    def has_permission(self, request, view):
        profile = _profile(request.user)
        return (
            request.user.is_authenticated
            and profile is not None
            and profile.mode == Mode.CUSTOMER
        )


class IsFreelancerMode(BasePermission):
    message = "เฉพาะโหมดช่างเท่านั้น"

    def has_permission(self, request, view):
        profile = _profile(request.user)
        return (
            request.user.is_authenticated
            and profile is not None
            and profile.mode == Mode.FREELANCER
        )


class IsAdminRole(BasePermission):
    def has_permission(self, request, view):
        return (
            request.user.is_authenticated
            and request.user.role == Role.ADMIN
            and request.user.is_staff
        )
