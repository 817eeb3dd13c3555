import logging
from urllib.parse import parse_qs
from channels.middleware import BaseMiddleware
from django.db import close_old_connections

logger = logging.getLogger(__name__)


class JWTAuthMiddleware(BaseMiddleware):
    """
    Resolves ``scope["user"]`` from a ``?token=<access jwt>`` query parameter.
    Browsers cannot set headers on a WebSocket handshake, so the token travels
    in the query string.
    """

    async def __call__(self, scope, receive, send):
        # Lazy imports to avoid AppRegistryNotReady
        from django.contrib.auth.models import AnonymousUser
        from django.contrib.auth import get_user_model
        from rest_framework_simplejwt.exceptions import TokenError
        from rest_framework_simplejwt.tokens import AccessToken

        User = get_user_model()
        close_old_connections()

        query_string = parse_qs(scope.get("query_string", b"").decode())
        token = query_string.get("token")
        scope["user"] = AnonymousUser()
        scope["notify_permission"] = query_string.get("notify_permission", ["default"])[0]

        if token:
            try:
                access_token = AccessToken(token[0])
                scope["user"] = await User.objects.aget(id=access_token["user_id"], is_active=True)
            except TokenError as e:
                logger.info("Rejected websocket token: %s", e)
            except User.DoesNotExist:
                logger.info("Websocket token for unknown user %s", access_token["user_id"])

        return await super().__call__(scope, receive, send)
