# app/services/realtime.py
"""
Real-time chat fan-out.

Per connection: connected -> joined(room) -> (send/receive)* -> left/disconnected.
Authorization is checked on join and again on send; both fail closed, so an
unconnected pair can neither subscribe to a room nor persist/broadcast into it.
"""
import logging

from starlette.websockets import WebSocket

from app.core.pubsub import ChatRooms, rooms as default_rooms
from app.services import chat
from app.services.validators import parse_id

logger = logging.getLogger("uvicorn.error")


async def on_join(ws: WebSocket, self_id, peer_id, channel: ChatRooms = default_rooms) -> str:
    """
    Subscribe `ws` to the room of (self_id, peer_id).

    Raises:
        ValidationError: malformed id
        AuthorizationError: the pair is not connected
    """
    a, b = parse_id(self_id, "user ID"), parse_id(peer_id, "user ID")
    await chat.ensure_connected(a, b)
    room_id = chat.derive_room_id(a, b)
    await channel.join(room_id, ws)
    logger.info("[realtime] %s joined room %s", a, room_id[:12])
    return room_id


async def on_send(ws: WebSocket, self_id, peer_id, text: str, channel: ChatRooms = default_rooms) -> dict:
    """
    Persist a message from self_id and broadcast it to everyone in the room,
    sender included. Nothing is broadcast if persistence is refused.

    Returns:
        The receiveMessage payload that was published
    """
    message = await chat.append_message(self_id, peer_id, self_id, text)
    room_id = chat.derive_room_id(parse_id(self_id), parse_id(peer_id))
    payload = {
        "type": "receiveMessage",
        "roomId": room_id,
        "selfId": str(self_id),
        "peerId": str(peer_id),
        "message": message,
    }
    delivered = await channel.publish(room_id, payload)
    logger.debug("[realtime] message %s delivered to %d sockets", message["id"], delivered)
    return payload


def on_leave(ws: WebSocket, self_id, peer_id, channel: ChatRooms = default_rooms) -> str:
    """Unsubscribe `ws` from the pair's room. Idempotent."""
    room_id = chat.derive_room_id(parse_id(self_id, "user ID"), parse_id(peer_id, "user ID"))
    if channel.leave(room_id, ws):
        logger.info("[realtime] %s left room %s", self_id, room_id[:12])
    return room_id


def on_disconnect(ws: WebSocket, channel: ChatRooms = default_rooms) -> list[str]:
    return channel.leave_all(ws)
