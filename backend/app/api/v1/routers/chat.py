# app/api/v1/routers/chat.py
from fastapi import APIRouter, Depends
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.services import chat
from app.services.validators import parse_id

router = APIRouter(prefix="/chat", tags=["chat"])

@router.get("/{target_user_id}")
async def get_chat(target_user_id: str, user: User = Depends(get_current_user)):
    """
    Chat history with `target_user_id`.

    Returns:
        dict: data is the chat (participants, ordered messages with sender
        names) or null when no message has been exchanged yet; roomId is the
        real-time room for the pair

    Error codes:
        - VALIDATION_ERROR (400): Malformed target id
        - NOT_CONNECTED (401): No accepted connection with the target
    """
    history = await chat.get_history(user.id, target_user_id)
    return {
        "success": True,
        "data": history,
        "roomId": chat.derive_room_id(user.id, parse_id(target_user_id)),
    }
