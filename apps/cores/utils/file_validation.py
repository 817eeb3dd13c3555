import os
from rest_framework.exceptions import ValidationError
from apps.cores.constants import (
    MAX_IMAGE_SIZE_BYTES,
    MAX_IMAGE_SIZE_MB,
    ALLOWED_IMAGE_EXTENSIONS,
    ALLOWED_IMAGE_MIME_TYPES,
)


def validate_image_upload(file):
    """
    Runs before anything is written to storage.
    """
    if not file:
        raise ValidationError("กรุณาเลือกไฟล์")

    if file.size > MAX_IMAGE_SIZE_BYTES:
        raise ValidationError(f"ไฟล์ต้องไม่เกิน {MAX_IMAGE_SIZE_MB}MB")

    ext = os.path.splitext(file.name)[1].lower().replace(".", "")
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationError("รองรับเฉพาะไฟล์ JPG, PNG หรือ WEBP")

    # MIME check (secondary)
    content_type = getattr(file, "content_type", None)
    if content_type and content_type not in ALLOWED_IMAGE_MIME_TYPES:
        raise ValidationError("ประเภทไฟล์ไม่ถูกต้อง")

    return file
