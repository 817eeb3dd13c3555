import logging

from django.db import DatabaseError

from apps.notifications.models import Notification

logger = logging.getLogger(__name__)


class NotificationFeed:
    """
    Per-subscriber view of a user's inbox: the most recent notifications
    plus an unread counter, kept in step with the table by optimistic
    local edits. Live inserts are prepended through ``receive``.
    """

    FETCH_LIMIT = 20

    def __init__(self, user_id):
        self.user_id = user_id
        self.items = []
        self.unread_count = 0
        self.loading = False

    def get(self, notification_id):
        for item in self.items:
            if item.id == notification_id:
                return item
        return None

    def fetch(self):
        if not self.user_id:
            return self.items

        self.loading = True
        try:
            rows = list(
                Notification.objects
                .filter(recipient_id=self.user_id)
                .order_by("-created_at", "-id")[: self.FETCH_LIMIT]
            )
        except DatabaseError:
            # keep whatever we had; no retry
            logger.exception("Could not load notifications for user %s", self.user_id)
            return self.items
        finally:
            self.loading = False

        self.items = rows
        self.unread_count = sum(1 for item in rows if not item.is_read)
        return self.items

    def mark_read(self, notification_id):
        if not self.user_id:
            return

        item = self.get(notification_id)
        if item is not None and not item.is_read:
            item.is_read = True
            self.unread_count = max(0, self.unread_count - 1)

        try:
            Notification.objects.filter(
                id=notification_id,
                recipient_id=self.user_id,
            ).update(is_read=True)
        except DatabaseError:
            logger.exception("mark_read(%s) failed for user %s, reloading", notification_id, self.user_id)
            self.fetch()

    def mark_all_read(self):
        if not self.user_id or self.unread_count == 0:
            return

        for item in self.items:
            item.is_read = True
        self.unread_count = 0

        try:
            Notification.objects.filter(
                recipient_id=self.user_id,
                is_read=False,
            ).update(is_read=True)
        except DatabaseError:
            logger.exception("mark_all_read failed for user %s, reloading", self.user_id)
            self.fetch()

    def receive(self, item):
        if self.get(item.id) is not None:
            return None
        self.items.insert(0, item)
        if not item.is_read:
            self.unread_count += 1
        return item
