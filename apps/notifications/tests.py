from datetime import timedelta
from unittest.mock import patch

from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.db import DatabaseError, transaction
from django.db.models.query import QuerySet
from django.test import TestCase, TransactionTestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from apps.cores.middleware import JWTAuthMiddleware
from apps.cores.testing import make_user
from .models import Notification, NotificationType
from .presentation import (
    NotificationBell,
    badge_label,
    emoji_for,
    group_by_read_state,
    time_ago,
)
from .routing import websocket_urlpatterns
from .services.create_notifications import notify_user, notify_user_safely
from .services.feed import NotificationFeed


def add_notifications(user, count, read=()):
    """Create ``count`` rows one minute apart; index 0 is the newest."""
    now = timezone.now()
    rows = []
    for i in range(count):
        notif = Notification.objects.create(
            recipient=user,
            notif_type=NotificationType.SYSTEM,
            title=f"แจ้งเตือน {i}",
            is_read=i in read,
        )
        Notification.objects.filter(pk=notif.pk).update(created_at=now - timedelta(minutes=i))
        rows.append(notif)
    return rows


class NotificationFeedTest(TestCase):
    def setUp(self):
        self.user = make_user("buyer@example.com")

    def test_fetch_newest_first_capped(self):
        add_notifications(self.user, 25, read=range(10, 25))
        add_notifications(make_user("other@example.com"), 3)

        feed = NotificationFeed(self.user.id)
        items = feed.fetch()

        self.assertEqual(len(items), NotificationFeed.FETCH_LIMIT)
        stamps = [item.created_at for item in items]
        self.assertEqual(stamps, sorted(stamps, reverse=True))
        self.assertEqual(items[0].title, "แจ้งเตือน 0")
        self.assertEqual(feed.unread_count, 10)
        self.assertFalse(feed.loading)

    def test_feed_without_user_does_nothing(self):
        feed = NotificationFeed(None)
        with self.assertNumQueries(0):
            feed.fetch()
            feed.mark_read(1)
            feed.mark_all_read()
        self.assertEqual(feed.items, [])

    def test_mark_read_decrements_only_unread(self):
        rows = add_notifications(self.user, 3, read=[2])
        feed = NotificationFeed(self.user.id)
        feed.fetch()
        self.assertEqual(feed.unread_count, 2)

        feed.mark_read(rows[0].id)
        self.assertEqual(feed.unread_count, 1)
        self.assertTrue(Notification.objects.get(pk=rows[0].pk).is_read)

        feed.mark_read(rows[2].id)
        self.assertEqual(feed.unread_count, 1)

        feed.mark_read(rows[0].id)
        self.assertEqual(feed.unread_count, 1)

    def test_mark_read_is_scoped_to_recipient(self):
        theirs = add_notifications(make_user("other@example.com"), 1)[0]
        feed = NotificationFeed(self.user.id)
        feed.fetch()
        feed.mark_read(theirs.id)
        self.assertFalse(Notification.objects.get(pk=theirs.pk).is_read)

    def test_mark_all_read(self):
        add_notifications(self.user, 4, read=[1])
        feed = NotificationFeed(self.user.id)
        feed.fetch()

        feed.mark_all_read()
        self.assertEqual(feed.unread_count, 0)
        self.assertTrue(all(item.is_read for item in feed.items))
        self.assertFalse(Notification.objects.filter(recipient=self.user, is_read=False).exists())

    def test_mark_all_read_with_nothing_unread_is_noop(self):
        add_notifications(self.user, 2, read=[0, 1])
        feed = NotificationFeed(self.user.id)
        feed.fetch()
        with self.assertNumQueries(0):
            feed.mark_all_read()
        self.assertEqual(feed.unread_count, 0)

    def test_receive_prepends_without_resorting(self):
        add_notifications(self.user, 20)
        feed = NotificationFeed(self.user.id)
        feed.fetch()

        live = Notification(
            id=999,
            recipient_id=self.user.id,
            notif_type=NotificationType.PAYMENT,
            title="ใหม่",
            created_at=timezone.now() - timedelta(days=1),
        )
        feed.receive(live)
        self.assertIs(feed.items[0], live)
        self.assertEqual(len(feed.items), 21)
        self.assertEqual(feed.unread_count, 21)

    def test_receive_ignores_item_already_listed(self):
        rows = add_notifications(self.user, 2)
        feed = NotificationFeed(self.user.id)
        feed.fetch()

        self.assertIsNone(feed.receive(Notification.objects.get(pk=rows[0].pk)))
        self.assertEqual(len(feed.items), 2)
        self.assertEqual(feed.unread_count, 2)

    def test_failed_fetch_keeps_previous_list(self):
        add_notifications(self.user, 2)
        feed = NotificationFeed(self.user.id)
        feed.fetch()

        with patch.object(Notification.objects, "filter", side_effect=DatabaseError("down")):
            with self.assertLogs("apps.notifications.services.feed", level="ERROR"):
                feed.fetch()

        self.assertEqual(len(feed.items), 2)
        self.assertEqual(feed.unread_count, 2)
        self.assertFalse(feed.loading)

    def test_failed_write_reconciles_from_table(self):
        rows = add_notifications(self.user, 2)
        feed = NotificationFeed(self.user.id)
        feed.fetch()

        with patch.object(QuerySet, "update", side_effect=DatabaseError("down")):
            with self.assertLogs("apps.notifications.services.feed", level="ERROR"):
                feed.mark_read(rows[0].id)

        self.assertEqual(feed.unread_count, 2)
        self.assertFalse(feed.get(rows[0].id).is_read)


class PresentationTest(TestCase):
    def test_badge(self):
        self.assertEqual(badge_label(0), "")
        self.assertEqual(badge_label(1), "1")
        self.assertEqual(badge_label(9), "9")
        self.assertEqual(badge_label(10), "9+")
        self.assertEqual(badge_label(250), "9+")

    def test_emoji(self):
        self.assertEqual(emoji_for(NotificationType.PAYMENT), "💰")
        self.assertEqual(emoji_for(NotificationType.LOTTERY), "🎟️")
        self.assertEqual(emoji_for("something_else"), "🔔")

    def test_time_ago(self):
        now = timezone.now()
        self.assertEqual(time_ago(now - timedelta(seconds=59), now), "เมื่อกี้")
        self.assertEqual(time_ago(now - timedelta(seconds=60), now), "1 นาทีที่แล้ว")
        self.assertEqual(time_ago(now - timedelta(minutes=59, seconds=59), now), "59 นาทีที่แล้ว")
        self.assertEqual(time_ago(now - timedelta(hours=1), now), "1 ชั่วโมงที่แล้ว")
        self.assertEqual(time_ago(now - timedelta(hours=23, minutes=59), now), "23 ชั่วโมงที่แล้ว")
        self.assertEqual(time_ago(now - timedelta(days=3, hours=5), now), "3 วันที่แล้ว")

    def test_group_by_read_state(self):
        user = make_user("buyer@example.com")
        rows = add_notifications(user, 3, read=[1])
        for row in rows:
            row.refresh_from_db()
        groups = group_by_read_state(rows)
        self.assertEqual([n.id for n in groups["unread"]], [rows[0].id, rows[2].id])
        self.assertEqual([n.id for n in groups["read"]], [rows[1].id])


class NotificationBellTest(TestCase):
    def setUp(self):
        self.user = make_user("buyer@example.com")
        self.rows = add_notifications(self.user, 3, read=[2])
        self.feed = NotificationFeed(self.user.id)
        self.feed.fetch()
        self.bell = NotificationBell(self.feed)

    def test_click_unread_item(self):
        self.assertEqual(self.bell.badge, "2")
        self.assertTrue(self.bell.toggle())

        self.assertTrue(self.bell.click_item(self.rows[0].id))

        self.assertEqual(self.bell.badge, "1")
        self.assertTrue(self.feed.get(self.rows[0].id).is_read)
        self.assertFalse(self.feed.get(self.rows[1].id).is_read)
        self.assertTrue(Notification.objects.get(pk=self.rows[0].pk).is_read)
        self.assertFalse(Notification.objects.get(pk=self.rows[1].pk).is_read)

    def test_click_read_item_does_nothing(self):
        with self.assertNumQueries(0):
            self.assertFalse(self.bell.click_item(self.rows[2].id))
        self.assertEqual(self.bell.badge, "2")

    def test_mark_all_only_offered_with_unread(self):
        self.assertTrue(self.bell.show_mark_all)
        self.assertTrue(self.bell.click_mark_all())
        self.assertEqual(self.bell.badge, "")
        self.assertFalse(self.bell.show_mark_all)
        self.assertFalse(self.bell.click_mark_all())

    def test_toggle_and_close(self):
        self.assertTrue(self.bell.toggle())
        self.assertFalse(self.bell.toggle())
        self.bell.toggle()
        self.bell.close()
        self.assertFalse(self.bell.is_open)

    def test_render(self):
        data = self.bell.render()
        self.assertEqual(data["badge"], "2")
        self.assertEqual(data["items"][0]["emoji"], "📢")
        self.assertEqual(data["items"][0]["time_ago"], "เมื่อกี้")
        self.assertIsNone(data["items"][0]["body"])
        self.assertEqual(data["groups"]["read"], [self.rows[2].id])
        self.assertFalse(data["is_empty"])


class NotifyUserTest(TestCase):
    def setUp(self):
        self.user = make_user("fixer@example.com")

    def test_persists_and_pushes_to_user_group(self):
        layer = get_channel_layer()
        channel = async_to_sync(layer.new_channel)()
        async_to_sync(layer.group_add)(f"user_{self.user.id}", channel)

        with self.captureOnCommitCallbacks(execute=True):
            notif = notify_user(self.user, NotificationType.NEW_JOB, "📋 มีงานใหม่เข้ามา", "งานซ่อม", {"job_id": 7})

        event = async_to_sync(layer.receive)(channel)
        self.assertEqual(event["type"], "send_notification")
        self.assertEqual(event["id"], notif.id)
        self.assertEqual(event["data"], {"job_id": 7})
        self.assertFalse(Notification.objects.get(pk=notif.pk).is_read)
        async_to_sync(layer.group_discard)(f"user_{self.user.id}", channel)

    def test_safe_variant_swallows_failures(self):
        target = "apps.notifications.services.create_notifications.notify_user"
        with patch(target, side_effect=RuntimeError("boom")):
            with self.assertLogs("apps.notifications.services.create_notifications", level="ERROR"):
                self.assertIsNone(notify_user_safely(self.user, NotificationType.SYSTEM, "x"))

    def test_safe_variant_skips_missing_recipient(self):
        self.assertIsNone(notify_user_safely(None, NotificationType.SYSTEM, "x"))
        self.assertFalse(Notification.objects.exists())


class NotifyUserCommitTest(TransactionTestCase):
    def setUp(self):
        self.user = make_user("fixer@example.com")
        self.layer = get_channel_layer()
        self.channel = async_to_sync(self.layer.new_channel)()
        async_to_sync(self.layer.group_add)(f"user_{self.user.id}", self.channel)

    def tearDown(self):
        async_to_sync(self.layer.group_discard)(f"user_{self.user.id}", self.channel)

    def test_rolled_back_notification_is_not_pushed(self):
        with self.assertRaises(RuntimeError):
            with transaction.atomic():
                notify_user(self.user, NotificationType.SYSTEM, "📢 ยกเลิก")
                raise RuntimeError("rollback")
        self.assertFalse(Notification.objects.exists())

        kept = notify_user(self.user, NotificationType.SYSTEM, "📢 ระบบ")

        event = async_to_sync(self.layer.receive)(self.channel)
        self.assertEqual(event["id"], kept.id)


class NotificationAPITest(APITestCase):
    def setUp(self):
        self.user = make_user("buyer@example.com")
        self.rows = add_notifications(self.user, 3, read=[2])
        self.client.force_authenticate(self.user)

    def test_list(self):
        response = self.client.get(reverse("notification-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["unread_count"], 2)
        self.assertEqual(response.data["items"][0]["id"], self.rows[0].id)

    def test_read_one(self):
        response = self.client.post(reverse("notification-read", args=[self.rows[1].id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["unread_count"], 1)

    def test_cannot_read_someone_elses(self):
        theirs = add_notifications(make_user("other@example.com"), 1)[0]
        response = self.client.post(reverse("notification-read", args=[theirs.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(Notification.objects.get(pk=theirs.pk).is_read)

    def test_read_all(self):
        response = self.client.post(reverse("notification-read-all"))
        self.assertEqual(response.data["unread_count"], 0)

    def test_bell(self):
        response = self.client.get(reverse("notification-bell"), {"open": "1"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["badge"], "2")
        self.assertTrue(response.data["is_open"])
        self.assertTrue(response.data["show_mark_all"])

    def test_requires_login(self):
        self.client.force_authenticate(None)
        response = self.client.get(reverse("notification-bell"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class NotificationConsumerTest(TransactionTestCase):
    def setUp(self):
        self.user = make_user("buyer@example.com")
        add_notifications(self.user, 2, read=[1])
        self.token = str(AccessToken.for_user(self.user))
        self.application = JWTAuthMiddleware(URLRouter(websocket_urlpatterns))

    def communicator(self, query):
        return WebsocketCommunicator(self.application, f"/ws/notifications/?{query}")

    async def test_anonymous_is_rejected(self):
        communicator = self.communicator("token=not-a-jwt")
        connected, _ = await communicator.connect()
        self.assertFalse(connected)

    async def test_snapshot_live_insert_and_popup(self):
        communicator = self.communicator(f"token={self.token}&notify_permission=granted")
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        snapshot = await communicator.receive_json_from()
        self.assertEqual(snapshot["event"], "snapshot")
        self.assertEqual(len(snapshot["items"]), 2)
        self.assertEqual(snapshot["unread_count"], 1)

        await database_sync_to_async(notify_user)(
            self.user, NotificationType.PAYMENT, "💰 ลูกค้าอัปโหลดสลิปการชำระแล้ว", "รอยืนยัน"
        )

        frame = await communicator.receive_json_from()
        self.assertEqual(frame["event"], "notification")
        self.assertEqual(frame["item"]["emoji"], "💰")
        self.assertEqual(frame["unread_count"], 2)

        popup = await communicator.receive_json_from()
        self.assertEqual(popup, {"event": "popup", "title": "💰 ลูกค้าอัปโหลดสลิปการชำระแล้ว", "body": "รอยืนยัน"})

        await communicator.send_json_to({"action": "mark_all_read"})
        snapshot = await communicator.receive_json_from()
        self.assertEqual(snapshot["unread_count"], 0)
        self.assertEqual(len(snapshot["items"]), 3)

        await communicator.disconnect()

    async def test_no_popup_without_permission(self):
        communicator = self.communicator(f"token={self.token}")
        connected, _ = await communicator.connect()
        self.assertTrue(connected)
        await communicator.receive_json_from()

        await database_sync_to_async(notify_user)(self.user, NotificationType.SYSTEM, "📢 ระบบ")
        frame = await communicator.receive_json_from()
        self.assertEqual(frame["event"], "notification")
        self.assertTrue(await communicator.receive_nothing())

        await communicator.disconnect()

    async def test_mark_read_frame(self):
        communicator = self.communicator(f"token={self.token}")
        await communicator.connect()
        snapshot = await communicator.receive_json_from()
        unread = next(item for item in snapshot["items"] if not item["is_read"])

        await communicator.send_json_to({"action": "mark_read", "id": unread["id"]})
        snapshot = await communicator.receive_json_from()
        self.assertEqual(snapshot["unread_count"], 0)

        await communicator.disconnect()

    async def test_disconnect_leaves_user_group(self):
        group_name = f"user_{self.user.id}"
        layer = get_channel_layer()
        first = self.communicator(f"token={self.token}")
        second = self.communicator(f"token={self.token}")
        for communicator in (first, second):
            connected, _ = await communicator.connect()
            self.assertTrue(connected)
            await communicator.receive_json_from()
        self.assertEqual(len(layer.groups[group_name]), 2)

        await first.disconnect()
        self.assertEqual(len(layer.groups[group_name]), 1)

        await database_sync_to_async(notify_user)(self.user, NotificationType.SYSTEM, "📢 ระบบ")
        frame = await second.receive_json_from()
        self.assertEqual(frame["event"], "notification")
        self.assertEqual(frame["unread_count"], 2)

        await second.disconnect()
        self.assertNotIn(group_name, layer.groups)

    async def test_item_already_in_snapshot_is_not_counted_twice(self):
        communicator = self.communicator(f"token={self.token}")
        await communicator.connect()
        snapshot = await communicator.receive_json_from()
        listed = await database_sync_to_async(Notification.objects.get)(pk=snapshot["items"][0]["id"])

        await get_channel_layer().group_send(f"user_{self.user.id}", listed.as_event())
        self.assertTrue(await communicator.receive_nothing())

        await database_sync_to_async(notify_user)(self.user, NotificationType.SYSTEM, "📢 ระบบ")
        frame = await communicator.receive_json_from()
        self.assertEqual(frame["unread_count"], 2)

        await communicator.disconnect()
