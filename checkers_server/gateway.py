"""Connection table: maps connection ids to live WebSockets."""

from __future__ import annotations

import logging
from typing import Iterable
from uuid import uuid4

from fastapi import WebSocket

from checkers_server.models import ServerMessage

logger = logging.getLogger(__name__)


class ConnectionGateway:
    def __init__(self):
        self._sockets: dict[str, WebSocket] = {}

    def register(self, ws: WebSocket) -> str:
        connection_id = str(uuid4())
        self._sockets[connection_id] = ws
        return connection_id

    def unregister(self, connection_id: str) -> None:
        self._sockets.pop(connection_id, None)

    async def send(self, connection_id: str, msg: ServerMessage) -> None:
        ws = self._sockets.get(connection_id)
        if ws is None:
            return
        try:
            await ws.send_json(msg.dump())
        except Exception:
            logger.warning("Failed to send %s to %s", msg.type, connection_id, exc_info=True)

    async def broadcast(self, connection_ids: Iterable[str], msg: ServerMessage) -> None:
        for connection_id in list(connection_ids):
            await self.send(connection_id, msg)
