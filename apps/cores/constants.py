import os
import time

# -----------------------------
# FILE SIZE LIMITS
# -----------------------------

MAX_IMAGE_SIZE_MB = 5
MAX_IMAGE_SIZE_BYTES = MAX_IMAGE_SIZE_MB * 1024 * 1024


# -----------------------------
# ALLOWED IMAGE TYPES
# (slips, job photos and KYC documents are all photos)
# -----------------------------

ALLOWED_IMAGE_EXTENSIONS = {
    "jpg",
    "jpeg",
    "png",
    "webp",
}

ALLOWED_IMAGE_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
}


# -----------------------------
# STORAGE PATHS
# -----------------------------

def _timestamped(prefix, filename):
    ext = os.path.splitext(filename)[1].lower().lstrip(".")
    return f"{prefix}-{int(time.time() * 1000)}.{ext}"


def job_photo_upload_path(instance, filename):
    return f"jobs/{_timestamped(instance.customer_id, filename)}"


def payment_slip_upload_path(instance, filename):
    return f"slips/{_timestamped(instance.pk, filename)}"


def id_card_upload_path(instance, filename):
    return f"kyc/{instance.user_id}/{_timestamped('id_card', filename)}"


def selfie_upload_path(instance, filename):
    return f"kyc/{instance.user_id}/{_timestamped('selfie_with_id', filename)}"
