from django.utils import timezone

from .models import NotificationType

TYPE_EMOJI = {
    NotificationType.NEW_JOB: "📋",
    NotificationType.JOB_ACCEPTED: "✅",
    NotificationType.JOB_COMPLETED: "🎉",
    NotificationType.PAYMENT: "💰",
    NotificationType.RATING: "⭐",
    NotificationType.LOTTERY: "🎟️",
    NotificationType.SYSTEM: "📢",
}
DEFAULT_EMOJI = "🔔"

BADGE_CAP = 9


def emoji_for(notif_type):
    return TYPE_EMOJI.get(notif_type, DEFAULT_EMOJI)


def badge_label(unread_count):
    if unread_count <= 0:
        return ""
    if unread_count > BADGE_CAP:
        return f"{BADGE_CAP}+"
    return str(unread_count)


def time_ago(created_at, now=None):
    now = now or timezone.now()
    seconds = int((now - created_at).total_seconds())
    if seconds < 60:
        return "เมื่อกี้"
    if seconds < 3600:
        return f"{seconds // 60} นาทีที่แล้ว"
    if seconds < 86400:
        return f"{seconds // 3600} ชั่วโมงที่แล้ว"
    return f"{seconds // 86400} วันที่แล้ว"


def group_by_read_state(items):
    groups = {"unread": [], "read": []}
    for item in items:
        groups["read" if item.is_read else "unread"].append(item)
    return groups


class NotificationBell:
    """
    Dropdown state over a NotificationFeed.

    The bell never talks to the database itself; every write goes through
    the feed so the badge and the list stay in step.
    """

    def __init__(self, feed):
        self.feed = feed
        self.is_open = False

    @property
    def badge(self):
        return badge_label(self.feed.unread_count)

    @property
    def show_mark_all(self):
        return self.feed.unread_count > 0

    def toggle(self):
        self.is_open = not self.is_open
        return self.is_open

    def close(self):
        self.is_open = False

    def click_item(self, notification_id):
        item = self.feed.get(notification_id)
        if item is None or item.is_read:
            return False
        self.feed.mark_read(notification_id)
        return True

    def click_mark_all(self):
        if not self.show_mark_all:
            return False
        self.feed.mark_all_read()
        return True

    def render_item(self, item, now=None):
        return {
            "id": item.id,
            "notif_type": item.notif_type,
            "emoji": emoji_for(item.notif_type),
            "title": item.title,
            "body": item.body or None,
            "data": item.data,
            "is_read": item.is_read,
            "created_at": item.created_at,
            "time_ago": time_ago(item.created_at, now),
        }

    def render(self, now=None):
        now = now or timezone.now()
        groups = group_by_read_state(self.feed.items)
        return {
            "badge": self.badge,
            "unread_count": self.feed.unread_count,
            "is_open": self.is_open,
            "loading": self.feed.loading,
            "show_mark_all": self.show_mark_all,
            "is_empty": not self.feed.items,
            "items": [self.render_item(item, now) for item in self.feed.items],
            "groups": {
                key: [item.id for item in members]
                for key, members in groups.items()
            },
        }
