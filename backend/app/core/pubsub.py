# backend/app/core/pubsub.py
"""
PubSub (Publish-Subscribe) module for chat room broadcasting.
Maps WebSocket connections to chat rooms and relays JSON messages to every
member of a room. Membership lives only in process memory and is rebuilt from
scratch when the process restarts.
"""
import json
import logging
from typing import Dict, Set
from starlette.websockets import WebSocket

logger = logging.getLogger("uvicorn.error")

class ChatRooms:
    """
    In-memory room membership table for the chat WebSocket.

    Architecture:
    - Router is responsible for ws.accept(); this module only handles routing
    - Messages are broadcast to all subscribers of a room, sender included
    - Empty rooms are dropped so the table only holds live rooms

    Data structure:
    - _rooms: Dict[room_id, Set[WebSocket]]
    """
    def __init__(self):
        # Example: {"9f2c...": {ws1, ws2}}
        self._rooms: Dict[str, Set[WebSocket]] = {}

    # -------- join / leave (no accept, only register) --------
    async def join(self, room_id: str, ws: WebSocket):
        """
        Subscribe a WebSocket connection to a room.

        Args:
            room_id: Opaque room token
            ws: WebSocket connection to register
        """
        self._rooms.setdefault(room_id, set()).add(ws)

    def leave(self, room_id: str, ws: WebSocket) -> bool:
        """
        Unsubscribe a WebSocket connection from a room.
        Idempotent: leaving a room twice is a no-op.

        Returns:
            True if the connection was a member, False otherwise
        """
        members = self._rooms.get(room_id)
        if not members or ws not in members:
            return False
        members.discard(ws)
        if not members:
            del self._rooms[room_id]
        return True

    def leave_all(self, ws: WebSocket) -> list[str]:
        """
        Remove a connection from every room it joined (used on disconnect).

        Returns:
            Room ids the connection was removed from
        """
        left = [room_id for room_id, members in self._rooms.items() if ws in members]
        for room_id in left:
            self.leave(room_id, ws)
        return left

    def members(self, room_id: str) -> Set[WebSocket]:
        return set(self._rooms.get(room_id, set()))

    def is_member(self, room_id: str, ws: WebSocket) -> bool:
        return ws in self._rooms.get(room_id, set())

    # -------- publish --------
    async def publish(self, room_id: str, payload: dict) -> int:
        """
        Publish a JSON message to all subscribers of a room.

        Connections that fail to receive are dropped from the room.

        Returns:
            Number of connections the message was delivered to
        """
        conns = list(self._rooms.get(room_id, set()))
        msg = json.dumps(payload)
        delivered = 0
        for s in conns:
            try:
                await s.send_text(msg)
                delivered += 1
            except Exception as e:
                logger.warning("[rooms] dropping dead socket from room %s: %r", room_id, e)
                self.leave(room_id, s)
        return delivered

# Global room table (singleton pattern)
rooms = ChatRooms()
