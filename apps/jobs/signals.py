from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from .models import Job, JobStatus
from .services.counters import record_completion, refresh_rating


@receiver(pre_save, sender=Job)
def remember_previous_state(sender, instance, **kwargs):
    previous = None
    if instance.pk:
        previous = Job.objects.filter(pk=instance.pk).values("status", "rating").first()
    instance._previous_status = previous["status"] if previous else None
    instance._previous_rating = previous["rating"] if previous else None


@receiver(post_save, sender=Job)
def update_profile_counters(sender, instance, created, **kwargs):
    previous_status = getattr(instance, "_previous_status", None)
    if instance.status == JobStatus.COMPLETED and previous_status != JobStatus.COMPLETED:
        record_completion(instance)

    previous_rating = getattr(instance, "_previous_rating", None)
    if instance.rating is not None and previous_rating is None and instance.freelancer_id:
        refresh_rating(instance.freelancer)
