"""Authenticated JSON WebSocket consumer shared by the realtime endpoints."""

import logging
from typing import Any, Dict, List

from channels.generic.websocket import AsyncJsonWebsocketConsumer

logger = logging.getLogger(__name__)


class BaseConsumer(AsyncJsonWebsocketConsumer):
    """
    Refuses anonymous sockets, joins `groups` on connect and routes client
    messages by their `type` to `on_<type>` coroutines.

    Server-side group_send events are handled by methods named after the
    event type, as usual for channels.
    """

    groups_to_join: List[str] = []

    async def connect(self):
        user = self.scope.get("user")
        if user is None or user.is_anonymous:
            await self.close()
            return

        self.user_id = user.id
        self.role = getattr(user, "role", None)
        self.joined = []
        for group in self.groups_to_join:
            await self.channel_layer.group_add(group, self.channel_name)
            self.joined.append(group)

        await self.accept()
        await self.send_json({"type": "connection_established", "user_id": self.user_id, "role": self.role})

    async def disconnect(self, close_code):
        for group in getattr(self, "joined", []):
            await self.channel_layer.group_discard(group, self.channel_name)
        self.joined = []

    async def receive_json(self, content: Dict[str, Any], **kwargs):
        msg_type = content.get("type") if isinstance(content, dict) else None
        handler = getattr(self, f"on_{msg_type}", None) if msg_type else None
        if handler is None:
            await self.send_error(f"Unknown message type: {msg_type}" if msg_type else "Message type is required")
            return

        try:
            await handler(content)
        except Exception:
            logger.exception("WS handler %s failed for user %s", msg_type, self.user_id)
            await self.send_error(f"Error processing {msg_type}")

    async def on_ping(self, content):
        await self.send_json({"type": "pong"})

    async def send_error(self, message: str):
        await self.send_json({"type": "error", "message": message})
