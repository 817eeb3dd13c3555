"""
Job state machine.

    status:          pending -> in_progress -> completed
                     pending -> cancelled
    payment_status:  unpaid -> pending_confirm -> paid

Every transition re-reads the row under ``select_for_update`` so two
requests racing on the same job cannot both move it. Notifications are
sent after the transaction closes and never fail the transition.
"""
import logging

from django.db import transaction
from rest_framework.exceptions import PermissionDenied

from apps.cores.exceptions import InvalidTransition
from apps.notifications.models import NotificationType
from apps.notifications.services.create_notifications import notify_user_safely
from apps.jobs.models import Job, JobStatus, PaymentStatus

logger = logging.getLogger(__name__)


def _baht(amount):
    return f"฿{amount:,.0f}"


def _require_customer(job, user):
    if user.id != job.customer_id:
        raise PermissionDenied("เฉพาะลูกค้าของงานนี้เท่านั้น")


def _require_freelancer(job, user):
    if user.id != job.freelancer_id:
        raise PermissionDenied("เฉพาะช่างที่รับงานนี้เท่านั้น")


def _locked(job):
    return Job.objects.select_for_update().get(pk=job.pk)


def available_actions(job, user):
    """Actions the given user may take on the job right now."""
    actions = []
    if user.id == job.customer_id:
        if job.status == JobStatus.PENDING and job.payment_status == PaymentStatus.UNPAID:
            actions += ["upload_slip", "cancel"]
        if job.status == JobStatus.IN_PROGRESS:
            actions.append("complete")
        if job.status == JobStatus.COMPLETED and job.rating is None:
            actions.append("rate")
    if user.id == job.freelancer_id:
        if job.status == JobStatus.PENDING and job.payment_status == PaymentStatus.PENDING_CONFIRM:
            actions.append("confirm_payment")
    return actions


def announce_new_job(job):
    customer_name = job.customer.profile.full_name
    notify_user_safely(
        job.freelancer,
        NotificationType.NEW_JOB,
        "📋 มีงานใหม่เข้ามา",
        f'{customer_name} จ้างงาน "{job.title}" {_baht(job.base_price)}',
        {"job_id": job.id},
    )


def upload_slip(job, user, slip):
    _require_customer(job, user)

    with transaction.atomic():
        job = _locked(job)
        if job.status != JobStatus.PENDING or job.payment_status != PaymentStatus.UNPAID:
            raise InvalidTransition("อัปโหลดสลิปได้เฉพาะงานที่ยังไม่ได้ชำระเงิน")
        job.payment_slip = slip
        job.payment_status = PaymentStatus.PENDING_CONFIRM
        job.save(update_fields=["payment_slip", "payment_status", "updated_at"])

    logger.info("Job %s: slip uploaded by customer %s", job.id, user.id)
    notify_user_safely(
        job.freelancer,
        NotificationType.PAYMENT,
        "💰 ลูกค้าอัปโหลดสลิปการชำระแล้ว",
        f'งาน "{job.title}" รอยืนยันการชำระ {_baht(job.total)}',
        {"job_id": job.id},
    )
    return job


def confirm_payment(job, user):
    _require_freelancer(job, user)

    with transaction.atomic():
        job = _locked(job)
        if job.status != JobStatus.PENDING or job.payment_status != PaymentStatus.PENDING_CONFIRM:
            raise InvalidTransition("ยังไม่มีสลิปที่รอยืนยัน")
        job.payment_status = PaymentStatus.PAID
        job.status = JobStatus.IN_PROGRESS
        job.save(update_fields=["payment_status", "status", "updated_at"])

    logger.info("Job %s: payment confirmed by freelancer %s", job.id, user.id)
    notify_user_safely(
        job.customer,
        NotificationType.PAYMENT,
        "✅ การชำระเงินได้รับการยืนยันแล้ว",
        f'งาน "{job.title}" ช่างยืนยันรับเงินแล้ว กำลังดำเนินงาน',
        {"job_id": job.id},
    )
    return job


def mark_complete(job, user):
    _require_customer(job, user)

    with transaction.atomic():
        job = _locked(job)
        if job.status != JobStatus.IN_PROGRESS:
            raise InvalidTransition("ยืนยันงานเสร็จได้เฉพาะงานที่กำลังดำเนินงาน")
        job.status = JobStatus.COMPLETED
        job.save(update_fields=["status", "updated_at"])

    logger.info("Job %s: completed", job.id)
    notify_user_safely(
        job.freelancer,
        NotificationType.JOB_COMPLETED,
        "🎉 งานเสร็จสิ้นแล้ว!",
        f'ลูกค้ายืนยันว่างาน "{job.title}" เสร็จสิ้นแล้ว',
        {"job_id": job.id},
    )
    return job


def cancel(job, user):
    _require_customer(job, user)

    with transaction.atomic():
        job = _locked(job)
        if job.status != JobStatus.PENDING or job.payment_status != PaymentStatus.UNPAID:
            raise InvalidTransition("ยกเลิกได้เฉพาะงานที่ยังไม่ได้ชำระเงิน")
        job.status = JobStatus.CANCELLED
        job.save(update_fields=["status", "updated_at"])

    logger.info("Job %s: cancelled by customer %s", job.id, user.id)
    notify_user_safely(
        job.freelancer,
        NotificationType.SYSTEM,
        "📢 ลูกค้ายกเลิกงาน",
        f'งาน "{job.title}" ถูกยกเลิกแล้ว',
        {"job_id": job.id},
    )
    return job


def rate(job, user, rating):
    _require_customer(job, user)

    with transaction.atomic():
        job = _locked(job)
        if job.status != JobStatus.COMPLETED:
            raise InvalidTransition("ให้คะแนนได้หลังงานเสร็จสิ้นเท่านั้น")
        if job.rating is not None:
            raise InvalidTransition("งานนี้ได้รับคะแนนแล้ว")
        job.rating = rating
        job.save(update_fields=["rating", "updated_at"])

    notify_user_safely(
        job.freelancer,
        NotificationType.RATING,
        "⭐ ได้รับรีวิวใหม่",
        f'งาน "{job.title}" ได้ {rating} ดาว',
        {"job_id": job.id, "rating": rating},
    )
    return job
