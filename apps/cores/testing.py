import shutil
import tempfile

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings

from apps.users.models import Role, Mode

User = get_user_model()


def make_user(email, role=Role.CUSTOMER, password="secret123", **profile_fields):
    user = User.objects.create_user(email=email, password=password, role=role)
    profile = user.profile
    profile.full_name = profile_fields.pop("full_name", email.split("@")[0])
    for field, value in profile_fields.items():
        setattr(profile, field, value)
    profile.save()
    return user


def make_freelancer(email, **profile_fields):
    profile_fields.setdefault("mode", Mode.FREELANCER)
    return make_user(email, role=Role.FREELANCER, **profile_fields)


def image_upload(name="photo.png", size=1024, content_type="image/png"):
    return SimpleUploadedFile(name, b"0" * size, content_type=content_type)


class TempMediaMixin:
    """Points MEDIA_ROOT at a throwaway directory for the test class."""

    @classmethod
    def setUpClass(cls):
        cls._media_root = tempfile.mkdtemp()
        cls._media_override = override_settings(MEDIA_ROOT=cls._media_root)
        cls._media_override.enable()
        super().setUpClass()

    @classmethod
    def tearDownClass(cls):
        super().tearDownClass()
        cls._media_override.disable()
        shutil.rmtree(cls._media_root, ignore_errors=True)
