# apps/users/tasks.py
import logging

from celery import shared_task

from .models import Profile

logger = logging.getLogger(__name__)


@shared_task
def reset_monthly_lottery_counts():
    updated = Profile.objects.filter(lottery_count_this_month__gt=0).update(
        lottery_count_this_month=0
    )
    logger.info("Reset monthly lottery counts on %s profiles", updated)
    return updated
