"""WebSocket endpoint and message routing."""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from checkers_server.board import Color
from checkers_server.models import (
    ErrorMsg,
    JoinMsg,
    LeaveMsg,
    MoveMsg,
    SyncMsg,
    parse_client_message,
)
from checkers_server.session import SessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_MESSAGE = "Unknown or invalid message"


async def receive_payload(ws: WebSocket):
    """Return the decoded JSON of the next text frame, or None if it is not JSON."""
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000))
    text = message.get("text")
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    registry: SessionRegistry = ws.app.state.registry
    gateway = registry.gateway

    await ws.accept()
    connection_id = gateway.register(ws)
    logger.debug("Connection %s opened", connection_id)
    try:
        while True:
            data = await receive_payload(ws)
            msg = parse_client_message(data)
            if msg is None:
                await gateway.send(connection_id, ErrorMsg(message=INVALID_MESSAGE))
                continue

            if isinstance(msg, JoinMsg):
                await registry.join(msg.code, connection_id)

            elif isinstance(msg, MoveMsg):
                await registry.move(
                    msg.code,
                    connection_id,
                    msg.from_.to_square(),
                    msg.to.to_square(),
                    color=Color(msg.color) if msg.color else None,
                )

            elif isinstance(msg, SyncMsg):
                await registry.sync(msg.code, connection_id)

            elif isinstance(msg, LeaveMsg):
                await registry.disconnect(connection_id)

    except WebSocketDisconnect:
        logger.debug("Connection %s closed", connection_id)
    finally:
        await registry.disconnect(connection_id)
        gateway.unregister(connection_id)
