from rest_framework.exceptions import APIException


class InvalidTransition(APIException):
    status_code = 409
    default_detail = "ไม่สามารถเปลี่ยนสถานะงานได้"
    default_code = "invalid_transition"


class KycRequired(APIException):
    status_code = 400
    default_detail = "กรุณายื่น KYC ก่อนเปลี่ยนเป็นโหมดช่าง"
    default_code = "kyc_required"
