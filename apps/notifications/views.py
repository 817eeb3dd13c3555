from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import Notification
from .presentation import NotificationBell
from .serializers import FeedSerializer
from .services.feed import NotificationFeed


def _feed_for(request):
    feed = NotificationFeed(request.user.id)
    feed.fetch()
    return feed


def _feed_response(feed, status_code=status.HTTP_200_OK):
    return Response(
        FeedSerializer({"unread_count": feed.unread_count, "items": feed.items}).data,
        status=status_code,
    )


class NotificationListView(APIView):
    """Latest 20 notifications for the current user, newest first."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return _feed_response(_feed_for(request))


class NotificationReadView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        get_object_or_404(Notification, pk=pk, recipient=request.user)
        feed = _feed_for(request)
        feed.mark_read(pk)
        return _feed_response(feed)


class NotificationReadAllView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        feed = _feed_for(request)
        feed.mark_all_read()
        return _feed_response(feed)


class NotificationBellView(APIView):
    """
    Bell widget as JSON. ``?open=1`` renders the dropdown expanded.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        bell = NotificationBell(_feed_for(request))
        if request.query_params.get("open") in ("1", "true"):
            bell.toggle()
        return Response(bell.render())
