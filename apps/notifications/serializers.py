from rest_framework import serializers

from .models import Notification
from .presentation import emoji_for, time_ago


class NotificationSerializer(serializers.ModelSerializer):
    emoji = serializers.SerializerMethodField()
    time_ago = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "notif_type",
            "emoji",
            "title",
            "body",
            "data",
            "is_read",
            "created_at",
            "time_ago",
        ]
        read_only_fields = fields

    def get_emoji(self, obj):
        return emoji_for(obj.notif_type)

    def get_time_ago(self, obj):
        return time_ago(obj.created_at)


class FeedSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()
    items = NotificationSerializer(many=True)
