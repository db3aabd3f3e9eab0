# app/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account and public profile
- ConnectionRequest: Directed request between two users
- Chat / ChatMessage: Conversation between an accepted pair and its messages
- Payment: Membership order created on the payment gateway
"""
from .user import User
from .connection_request import ConnectionRequest
from .chat import Chat, ChatMessage
from .payment import Payment
