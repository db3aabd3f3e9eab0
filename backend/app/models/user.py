# app/models/user.py
"""
Database model for users.
Represents a developer profile: identity, credentials and the public profile
fields shown in the discovery feed, request lists and chat history.
"""
import uuid
from tortoise import fields, models

DEFAULT_BIO = "Default Bio"
DEFAULT_PHOTO_URL = "https://www.inzone.ae/wp-content/uploads/2025/02/dummy-profile-pic.jpg"

class User(models.Model):
    """
    User database model.

    Relationships:
    - Sent / received ConnectionRequests (via related_name on ConnectionRequest)
    - Chats as user_a or user_b

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email is normalised to lower case and unique
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    first_name = fields.CharField(max_length=30)
    last_name = fields.CharField(max_length=30, null=True)
    email = fields.CharField(max_length=256, unique=True, index=True)  # Normalised (lower case) email
    password_hash = fields.CharField(max_length=255)
    age = fields.IntField(null=True)
    gender = fields.CharField(max_length=32, null=True)  # male / female / others / prefer not to say
    skills = fields.JSONField(default=list)  # <= 10 entries, <= 30 chars each
    bio = fields.CharField(max_length=200, default=DEFAULT_BIO)
    photo_url = fields.CharField(max_length=1024, default=DEFAULT_PHOTO_URL)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
