import logging
from urllib.parse import parse_qs

from channels.auth import AuthMiddlewareStack
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import AccessToken

logger = logging.getLogger(__name__)


@database_sync_to_async
def get_user_for_token(raw_token):
    from .models import User

    try:
        token = AccessToken(raw_token)
    except (InvalidToken, TokenError) as e:
        logger.info(f"Rejected websocket token: {str(e)}")
        return AnonymousUser()

    try:
        return User.objects.select_related('tenant').get(pk=token['user_id'], is_active=True)
    except User.DoesNotExist:
        return AnonymousUser()


class JWTAuthMiddleware(BaseMiddleware):
    """
    Authenticates websocket connections from a `?token=<access>` query
    parameter, leaving the session user in place when no token is sent.
    """

    async def __call__(self, scope, receive, send):
        query = parse_qs(scope.get('query_string', b'').decode())
        token = query.get('token', [None])[0]
        if token:
            scope['user'] = await get_user_for_token(token)
        return await super().__call__(scope, receive, send)


def JWTAuthMiddlewareStack(inner):
    return AuthMiddlewareStack(JWTAuthMiddleware(inner))
