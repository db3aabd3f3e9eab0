# app/models/chat.py
"""
Database models for chats.
A Chat is keyed by the unordered participant pair and owns an append-only,
ordered sequence of ChatMessage rows.
"""
import uuid
from tortoise import fields, models

class Chat(models.Model):
    """
    Chat database model.

    user_a / user_b hold the participants in canonical (sorted) order and
    pair_key is unique, so two concurrent first messages cannot create two
    divergent chats for the same pair.
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    pair_key = fields.CharField(max_length=80, unique=True)
    user_a = fields.ForeignKeyField(
        "models.User", related_name="chats_as_a", db_constraint=False
    )
    user_b = fields.ForeignKeyField(
        "models.User", related_name="chats_as_b", db_constraint=False
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "chats"

class ChatMessage(models.Model):
    id = fields.IntField(pk=True)  # Monotonic: defines message order within a chat
    chat = fields.ForeignKeyField("models.Chat", related_name="messages", on_delete=fields.CASCADE)
    sender = fields.ForeignKeyField(
        "models.User", related_name="chat_messages", db_constraint=False
    )
    text = fields.TextField()
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "chat_messages"
