# app/services/notifications.py
"""
Best-effort transactional email over an HTTP email API.

send_email() raises NotificationError on failure; notify() is the fire-and-forget
wrapper used by primary operations: it never raises and returns the failure
message (or None) so callers can attach it to their response as metadata.
"""
import logging

import httpx

from app.config import settings
from app.core.errors import NotificationError
from app.models.user import User

logger = logging.getLogger("uvicorn.error")

EMAIL_TIMEOUT_SECONDS = 5.0


async def send_email(to: str, subject: str, html: str) -> None:
    """
    POST a message to the configured email API. Any 2xx counts as accepted;
    the response body is not inspected, providers differ in what they return.

    Raises:
        NotificationError: provider not configured, unreachable, or non-2xx
    """
    if not settings.email_api_url:
        raise NotificationError("Email API is not configured")

    headers = {"content-type": "application/json"}
    if settings.email_api_key:
        headers["authorization"] = f"Bearer {settings.email_api_key}"
    payload = {"from": settings.email_from, "to": [to], "subject": subject, "html": html}

    try:
        async with httpx.AsyncClient(timeout=EMAIL_TIMEOUT_SECONDS) as client:
            resp = await client.post(settings.email_api_url, headers=headers, json=payload)
            resp.raise_for_status()
    except httpx.HTTPError as e:
        raise NotificationError(f"Email delivery failed: {e!r}")


async def notify(to: str, subject: str, html: str) -> str | None:
    if not settings.email_api_url:
        logger.debug("[notify] email API not configured, skipping %r", subject)
        return None
    try:
        await send_email(to, subject, html)
    except NotificationError as e:
        logger.warning("[notify] %s", e.message)
        return e.message
    except Exception as e:
        # Never let the side channel fail the operation that triggered it
        logger.exception("[notify] unexpected failure sending %r", subject)
        return f"Email delivery failed: {e!r}"
    return None


async def notify_connection_request(sender: User, recipient: User) -> str | None:
    name = " ".join(p for p in (sender.first_name, sender.last_name) if p)
    html = (
        f"<p>Hi {recipient.first_name},</p>"
        f"<p><b>{name}</b> is interested in connecting with you on CodeMate.</p>"
        "<p>Log in to review the request.</p>"
    )
    return await notify(recipient.email, f"{name} wants to connect on CodeMate", html)


async def notify_pending_requests(recipient: User, count: int) -> str | None:
    html = (
        f"<p>Hi {recipient.first_name},</p>"
        f"<p>You have {count} pending connection request{'s' if count != 1 else ''} waiting on CodeMate.</p>"
    )
    return await notify(recipient.email, "You have pending connection requests", html)
