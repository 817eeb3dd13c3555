import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Avg

from apps.notifications.models import NotificationType
from apps.notifications.services.create_notifications import notify_user_safely
from apps.users.milestones import (
    CUSTOMER_SPENDING_MILESTONE,
    FREELANCER_EARNING_MILESTONE,
    tickets_crossed,
)
from apps.users.models import Profile

logger = logging.getLogger(__name__)


def _add_to_total(user, field, amount, milestone, label):
    profile = Profile.objects.select_for_update().get(user_id=user.id)
    before = getattr(profile, field)
    after = before + amount
    tickets = tickets_crossed(before, after, milestone)

    setattr(profile, field, after)
    profile.total_jobs += 1
    profile.lottery_count_this_month += tickets
    profile.save(update_fields=[field, "total_jobs", "lottery_count_this_month", "updated_at"])

    if tickets:
        logger.info("User %s earned %s lottery ticket(s)", user.id, tickets)
        notify_user_safely(
            user,
            NotificationType.LOTTERY,
            "🎟️ ได้รับตั๋วลอตเตอรี่ฟรี!",
            f"{label}ครบ ฿{milestone:,.0f} รับตั๋วลอตเตอรี่ {tickets} ใบ",
            {"tickets": tickets, "lottery_count_this_month": profile.lottery_count_this_month},
        )
    return profile


@transaction.atomic
def record_completion(job):
    """Roll a freshly completed job into both parties' totals."""
    _add_to_total(
        job.customer,
        "spending_total",
        Decimal(job.total),
        CUSTOMER_SPENDING_MILESTONE,
        "ยอดจ้างงานสะสม",
    )
    if job.freelancer_id:
        _add_to_total(
            job.freelancer,
            "earning_total",
            Decimal(job.base_price),
            FREELANCER_EARNING_MILESTONE,
            "รายได้สะสม",
        )


def refresh_rating(freelancer):
    from apps.jobs.models import Job

    avg = (
        Job.objects
        .filter(freelancer=freelancer, rating__isnull=False)
        .aggregate(avg=Avg("rating"))["avg"]
    )
    value = Decimal(str(avg or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    Profile.objects.filter(user=freelancer).update(avg_rating=value)
    return value
