"""
/ws/chat event loop driven frame by frame against a fake socket and a real database.
"""
import json

import pytest
from starlette.websockets import WebSocketDisconnect
from tortoise.exceptions import OperationalError

from app.api.v1.routers import ws_chat as ws_chat_module
from app.api.v1.routers.ws_chat import ws_chat
from app.core.pubsub import rooms
from app.core.security import create_access_token
from app.models.chat import ChatMessage
from app.models.connection_request import ConnectionRequest, pair_key
from app.services import realtime
from app.services.chat import derive_room_id


pytestmark = pytest.mark.asyncio


class FakeChatSocket:
    """Plays a fixed list of client frames, then disconnects."""

    def __init__(self, token: str | None, frames: list):
        self.query_params = {"token": token} if token else {}
        self.cookies = {}
        self.frames = [f if isinstance(f, str) else json.dumps(f) for f in frames]
        self.sent = []
        self.accepted = False
        self.closed_with = None

    async def accept(self):
        self.accepted = True

    async def close(self, code: int = 1000):
        self.closed_with = code

    async def receive_text(self) -> str:
        if not self.frames:
            raise WebSocketDisconnect(code=1000)
        return self.frames.pop(0)

    async def send_text(self, text: str):
        self.sent.append(json.loads(text))


class PeerSocket:
    def __init__(self):
        self.sent = []

    async def send_text(self, text: str):
        self.sent.append(json.loads(text))


async def _connect(a, b):
    await ConnectionRequest.create(
        from_user_id=a.id, to_user_id=b.id, status="accepted", pair_key=pair_key(a.id, b.id)
    )


def _token(user) -> str:
    return create_access_token(str(user.id))


async def test_join_send_leave_round_trip(create_user):
    a, _ = await create_user()
    b, _ = await create_user()
    await _connect(a, b)
    room_id = derive_room_id(a.id, b.id)

    peer = PeerSocket()
    await realtime.on_join(peer, b.id, a.id, rooms)
    ws = FakeChatSocket(_token(a), [
        {"type": "joinChat", "peerId": str(b.id), "selfId": str(a.id)},
        {"type": "sendMessage", "targetUserId": str(b.id), "text": "  hi there "},
        {"type": "leaveChat", "peerId": str(b.id)},
    ])
    try:
        await ws_chat(ws)
    finally:
        rooms.leave_all(peer)

    assert ws.accepted
    assert [f["type"] for f in ws.sent] == ["joined", "receiveMessage", "left"]
    assert ws.sent[0]["roomId"] == room_id
    assert ws.sent[2]["roomId"] == room_id

    echo = ws.sent[1]
    assert echo["message"]["text"] == "hi there"
    assert echo["message"]["senderId"] == str(a.id)
    assert peer.sent == [echo]
    assert await ChatMessage.all().count() == 1
    assert not rooms.is_member(room_id, ws)


async def test_bad_frames_get_error_replies_and_keep_the_socket(create_user):
    a, _ = await create_user()
    b, _ = await create_user()
    stranger, _ = await create_user()
    await _connect(a, b)

    ws = FakeChatSocket(_token(a), [
        "{not json",
        {"type": "joinChat", "peerId": str(b.id), "selfId": str(stranger.id)},
        {"type": "sendMessage", "peerId": str(b.id), "text": 123},
        {"type": "sendMessage", "peerId": str(b.id), "text": []},
        {"type": "joinChat"},
        {"type": "joinChat", "peerId": str(stranger.id)},
        {"type": "bogus"},
    ])
    await ws_chat(ws)

    assert [f["type"] for f in ws.sent] == ["error"] * 7
    codes = [f["code"] for f in ws.sent]
    assert codes == [
        "VALIDATION_ERROR",
        "AUTH_MISMATCH",
        "VALIDATION_ERROR",
        "VALIDATION_ERROR",
        "VALIDATION_ERROR",
        "NOT_CONNECTED",
        "VALIDATION_ERROR",
    ]
    assert "bogus" in ws.sent[-1]["message"]
    assert await ChatMessage.all().count() == 0


async def test_storage_failure_is_reported_in_band(create_user, monkeypatch):
    a, _ = await create_user()
    b, _ = await create_user()
    await _connect(a, b)

    async def broken_join(*args, **kwargs):
        raise OperationalError("database is locked")

    monkeypatch.setattr(ws_chat_module.realtime, "on_join", broken_join)
    ws = FakeChatSocket(_token(a), [
        {"type": "joinChat", "peerId": str(b.id)},
        {"type": "leaveChat", "peerId": str(b.id)},
    ])
    await ws_chat(ws)

    assert ws.sent[0] == {
        "type": "error",
        "code": "PERSISTENCE_ERROR",
        "message": "Something went wrong, please try again",
    }
    assert ws.sent[1]["type"] == "left"


async def test_unknown_user_token_is_refused(create_user):
    a, _ = await create_user()
    token = _token(a)
    await a.delete()

    ws = FakeChatSocket(token, [{"type": "joinChat", "peerId": "x"}])
    await ws_chat(ws)

    assert ws.closed_with == 1008
    assert not ws.accepted
    assert ws.sent == []
