# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- errors: Domain error taxonomy rendered by the API layer
- pubsub: In-memory chat room broadcasting
- security: Password hashing and JWT tokens
"""
