# app/services/chat.py
"""
Chat authorization and persistence.

Two users may converse only while an accepted connection request exists between
them. Chats are created lazily on the first message and only ever grow.
"""
import hashlib
import logging

from tortoise.exceptions import IntegrityError

from app.config import settings
from app.core.errors import AuthorizationError, ValidationError
from app.models.chat import Chat, ChatMessage
from app.models.connection_request import pair_key
from app.services.connections import is_connected
from app.services.profiles import sender_summary
from app.services.validators import parse_id

logger = logging.getLogger("uvicorn.error")


def derive_room_id(a, b) -> str:
    """
    Opaque, order-independent room token for the pair {a, b}.

    sha256 over the canonical pair key: the same unordered pair always maps to
    the same token and the token does not expose the participant ids.
    """
    return hashlib.sha256(pair_key(a, b).encode("utf-8")).hexdigest()


async def authorize(a, b) -> bool:
    return await is_connected(a, b)


async def ensure_connected(a, b) -> None:
    if not await authorize(a, b):
        raise AuthorizationError("You are not connected with this user")


def message_to_dict(m: ChatMessage) -> dict:
    return {
        "id": m.id,
        "senderId": str(m.sender_id),
        "text": m.text,
        "createdAt": m.created_at.isoformat() if m.created_at else None,
    }


async def get_history(user_a, user_b) -> dict | None:
    """
    Chat between the pair with every message's sender resolved to public name
    fields, or None when the pair has not exchanged a message yet.

    Raises:
        ValidationError: malformed id
        AuthorizationError: the pair is not connected
    """
    a, b = parse_id(user_a, "user ID"), parse_id(user_b, "user ID")
    await ensure_connected(a, b)

    chat = await Chat.get_or_none(pair_key=pair_key(a, b))
    if not chat:
        return None
    messages = await ChatMessage.filter(chat_id=chat.id).order_by("id").prefetch_related("sender")
    items = []
    for m in messages:
        item = message_to_dict(m)
        item["sender"] = sender_summary(m.sender)
        items.append(item)
    return {
        "id": str(chat.id),
        "participants": [str(chat.user_a_id), str(chat.user_b_id)],
        "messages": items,
    }


async def _get_or_create_chat(a, b) -> Chat:
    key = pair_key(a, b)
    chat = await Chat.get_or_none(pair_key=key)
    if chat:
        return chat
    first, second = sorted((a, b), key=str)
    try:
        chat = await Chat.create(pair_key=key, user_a_id=first, user_b_id=second)
        logger.info("[chat] created chat %s", chat.id)
        return chat
    except IntegrityError:
        # Another task created the chat between our read and insert
        return await Chat.get(pair_key=key)


async def append_message(user_a, user_b, sender_id, text: str) -> dict:
    """
    Append a message from `sender_id` to the chat between the pair, creating the
    chat on first use.

    Raises:
        ValidationError: malformed id, sender not in the pair, empty or too long text
        AuthorizationError: the pair is not connected
    """
    a, b = parse_id(user_a, "user ID"), parse_id(user_b, "user ID")
    sender = parse_id(sender_id, "sender ID")
    if sender not in (a, b):
        raise ValidationError("Sender must be a chat participant")
    if text is None:
        text = ""
    if not isinstance(text, str):
        raise ValidationError("Message text must be a string")
    text = text.strip()
    if not text:
        raise ValidationError("Message text cannot be empty")
    if len(text) > settings.chat_message_max_length:
        raise ValidationError(f"Message cannot exceed {settings.chat_message_max_length} characters")

    await ensure_connected(a, b)

    chat = await _get_or_create_chat(a, b)
    message = await ChatMessage.create(chat_id=chat.id, sender_id=sender, text=text)
    return message_to_dict(message)
