from rest_framework.permissions import BasePermission


class IsJobParty(BasePermission):
    message = "คุณไม่มีสิทธิ์เข้าถึงงานนี้"

    def has_object_permission(self, request, view, obj):
        return obj.is_party(request.user)
