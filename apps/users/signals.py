from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import User, Profile, Role, Mode


@receiver(post_save, sender=User)
def create_profile_for_user(sender, instance, created, **kwargs):
    if not created:
        return
    Profile.objects.get_or_create(
        user=instance,
        defaults={
            "full_name": instance.get_full_name() or instance.email,
            "mode": Mode.FREELANCER if instance.role == Role.FREELANCER else Mode.CUSTOMER,
        },
    )
