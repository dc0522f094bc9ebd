"""WebSocket authentication: JWT in the querystring, else the session user."""

import logging
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken

User = get_user_model()
logger = logging.getLogger(__name__)


@database_sync_to_async
def _user_for_token(raw_token: str):
    try:
        access = AccessToken(raw_token)
    except TokenError as exc:
        logger.debug("WebSocket JWT rejected: %s", exc)
        return AnonymousUser()
    return User.objects.filter(id=access.get("user_id"), is_active=True).first() or AnonymousUser()


class JWTOrCookieAuthMiddleware(BaseMiddleware):
    """
    Resolve scope["user"] from:
    1. ?token=<access jwt> (mobile / dashboard clients)
    2. the user AuthMiddlewareStack already put on the scope (browser session)
    """

    async def __call__(self, scope, receive, send):
        params = parse_qs(scope.get("query_string", b"").decode())
        token_list = params.get("token")

        if token_list:
            scope["user"] = await _user_for_token(token_list[0])
        elif "user" not in scope:
            scope["user"] = AnonymousUser()

        return await super().__call__(scope, receive, send)
