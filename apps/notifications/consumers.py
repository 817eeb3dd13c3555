import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.core.serializers.json import DjangoJSONEncoder

logger = logging.getLogger(__name__)


class NotificationConsumer(AsyncWebsocketConsumer):
    """
    Live inbox for one connection. Each connection owns its own feed; the
    feed and the group membership go away with the socket.
    """

    async def connect(self):
        from apps.notifications.services.feed import NotificationFeed

        self.user = self.scope.get("user")
        self.group_name = None
        self.feed = None

        if not self.user or not self.user.is_authenticated:
            logger.info("Rejected anonymous notification socket")
            await self.close()
            return

        self.group_name = f"user_{self.user.id}"
        self.popups_allowed = self.scope.get("notify_permission") == "granted"
        self.feed = NotificationFeed(self.user.id)

        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

        await database_sync_to_async(self.feed.fetch)()
        await self.send_snapshot()

    async def disconnect(self, close_code):
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
        self.feed = None

    async def receive(self, text_data=None, bytes_data=None):
        if self.feed is None:
            return
        try:
            payload = json.loads(text_data or "")
        except json.JSONDecodeError:
            logger.info("Ignoring malformed frame from user %s", self.user.id)
            return
        if not isinstance(payload, dict):
            return

        action = payload.get("action")
        if action == "mark_read":
            try:
                notification_id = int(payload.get("id"))
            except (TypeError, ValueError):
                logger.info("mark_read without a valid id from user %s", self.user.id)
                return
            await database_sync_to_async(self.feed.mark_read)(notification_id)
        elif action == "mark_all_read":
            await database_sync_to_async(self.feed.mark_all_read)()
        elif action == "refetch":
            await database_sync_to_async(self.feed.fetch)()
        else:
            logger.info("Unknown notification action %r", action)
            return

        await self.send_snapshot()

    async def send_notification(self, event):
        from apps.notifications.models import Notification
        from apps.notifications.serializers import NotificationSerializer

        if self.feed is None:
            return

        item = self.feed.receive(Notification.from_event(event))
        if item is None:
            # already in the snapshot
            return
        await self.send_frame({
            "event": "notification",
            "item": NotificationSerializer(item).data,
            "unread_count": self.feed.unread_count,
        })

        if self.popups_allowed:
            await self.send_frame({
                "event": "popup",
                "title": item.title,
                "body": item.body or "",
            })

    async def send_snapshot(self):
        from apps.notifications.serializers import NotificationSerializer

        await self.send_frame({
            "event": "snapshot",
            "items": NotificationSerializer(self.feed.items, many=True).data,
            "unread_count": self.feed.unread_count,
        })

    async def send_frame(self, content):
        await self.send(text_data=json.dumps(content, cls=DjangoJSONEncoder, ensure_ascii=False))
