import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from apps.notifications.models import Notification

logger = logging.getLogger(__name__)


def _push(channel_layer, user_id, event):
    try:
        async_to_sync(channel_layer.group_send)(f"user_{user_id}", event)
    except Exception:
        logger.exception("Failed to push notification %s to user %s", event.get("id"), user_id)


def notify_user(recipient, notif_type, title, message="", data=None):

    if data is None:
        data = {}

    # Save in DB
    notif = Notification.objects.create(
        recipient=recipient,
        notif_type=notif_type,
        title=title,
        body=message or "",
        data=data
    )

    # Push via WebSocket once the row is committed
    channel_layer = get_channel_layer()
    if channel_layer is not None:
        event = notif.as_event()
        transaction.on_commit(lambda: _push(channel_layer, recipient.id, event))

    return notif


def notify_user_safely(recipient, notif_type, title, message="", data=None):
    """
    Fire-and-forget variant used by job and KYC actions: a failed
    notification is logged and never fails the action that triggered it.
    """
    if recipient is None:
        return None
    try:
        # savepoint: a failed insert leaves the caller's transaction usable
        with transaction.atomic():
            return notify_user(recipient, notif_type, title, message, data)
    except Exception:
        logger.exception("Failed to notify user %s (%s)", recipient.id, notif_type)
        return None
