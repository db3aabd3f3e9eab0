import json
import logging

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect
from tortoise.exceptions import BaseORMException

from app.api.v1.deps import resolve_token
from app.core.errors import AuthorizationError, CodeMateError, PersistenceError, ValidationError
from app.core.pubsub import rooms
from app.core.security import ACCESS_COOKIE
from app.services import realtime

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

WS_POLICY_VIOLATION = 1008

def _peer_id(msg: dict):
    peer = msg.get("peerId") or msg.get("targetUserId")
    if not peer:
        raise ValidationError("peerId is required")
    return peer

def _check_self(msg: dict, user_id: str) -> None:
    declared = msg.get("selfId") or msg.get("userId")
    if declared and str(declared) != user_id:
        raise AuthorizationError("selfId does not match the authenticated user", code="AUTH_MISMATCH")

@router.websocket("/ws/chat")
async def ws_chat(ws: WebSocket):
    """
    WebSocket endpoint for real-time chat between connected users.

    The connection is authenticated with the `token` query parameter or the
    accessToken cookie. Every frame is JSON with a "type" field.

    Message flow:
    1. Client sends: {"type": "joinChat", "peerId": "..."}
       Server replies: {"type": "joined", "roomId": "..."}
    2. Client sends: {"type": "sendMessage", "peerId": "...", "text": "..."}
       Server broadcasts {"type": "receiveMessage", ...} to the room (sender included)
    3. Client sends: {"type": "leaveChat", "peerId": "..."}
       Server replies: {"type": "left", "roomId": "..."}

    Join and send both require an accepted connection with the peer. Errors are
    reported as {"type": "error", "code": ..., "message": ...} and keep the
    socket open. On disconnect the socket leaves every room it joined.
    """
    token = ws.query_params.get("token") or ws.cookies.get(ACCESS_COOKIE)
    user = await resolve_token(token)
    if not user:
        await ws.close(code=WS_POLICY_VIOLATION)
        return
    await ws.accept()
    user_id = str(user.id)
    logger.info("[ws_chat] %s connected", user_id)
    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
                if not isinstance(msg, dict):
                    raise ValidationError("Frame must be a JSON object")
                _check_self(msg, user_id)
                kind = msg.get("type")
                if kind == "joinChat":
                    room_id = await realtime.on_join(ws, user.id, _peer_id(msg), rooms)
                    await ws.send_text(json.dumps({"type": "joined", "roomId": room_id}))
                elif kind == "sendMessage":
                    await realtime.on_send(ws, user.id, _peer_id(msg), msg.get("text", ""), rooms)
                elif kind == "leaveChat":
                    room_id = realtime.on_leave(ws, user.id, _peer_id(msg), rooms)
                    await ws.send_text(json.dumps({"type": "left", "roomId": room_id}))
                else:
                    raise ValidationError(f"Unknown message type: {kind}")
            except json.JSONDecodeError:
                await ws.send_text(json.dumps({"type": "error", "code": "VALIDATION_ERROR",
                                               "message": "Invalid JSON"}))
            except CodeMateError as e:
                await ws.send_text(json.dumps({"type": "error", **e.to_dict()}))
            except BaseORMException:
                logger.exception("[ws_chat] %s storage failure", user_id)
                err = PersistenceError("Something went wrong, please try again")
                await ws.send_text(json.dumps({"type": "error", **err.to_dict()}))
    except WebSocketDisconnect:
        left = realtime.on_disconnect(ws, rooms)
        logger.info("[ws_chat] %s disconnected (left %d rooms)", user_id, len(left))
    except Exception:
        realtime.on_disconnect(ws, rooms)
        logger.exception("[ws_chat] %s connection error", user_id)
