# app/core/errors.py
"""
Domain error taxonomy.

Services raise these exceptions; the FastAPI exception handlers registered in
app.main turn them into {"success": False, "error": {"code", "message"}} responses,
and the chat WebSocket turns them into {"type": "error", ...} frames.
"""


class CodeMateError(Exception):
    """Base class for every error a service may raise to the API boundary."""

    code = "ERROR"
    status_code = 500

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(CodeMateError):
    """Malformed input: bad enum value, missing field, malformed identifier."""

    code = "VALIDATION_ERROR"
    status_code = 400


class SelfReferenceError(CodeMateError):
    code = "SELF_REFERENCE"
    status_code = 400


class NotFoundError(CodeMateError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(CodeMateError):
    """A connection request already exists for the unordered pair."""

    code = "REQUEST_EXISTS"
    status_code = 400


class AuthorizationError(CodeMateError):
    """No accepted connection between the pair, or a bad credential."""

    code = "NOT_CONNECTED"
    status_code = 401


class PersistenceError(CodeMateError):
    code = "PERSISTENCE_ERROR"
    status_code = 500


class NotificationError(CodeMateError):
    """Best-effort side channel failed. Never escapes a primary operation."""

    code = "NOTIFICATION_FAILED"
    status_code = 500


class PaymentError(CodeMateError):
    code = "PAYMENT_FAILED"
    status_code = 502
