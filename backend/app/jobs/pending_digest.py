# app/jobs/pending_digest.py
"""
Daily reminder for users with pending connection requests.

Collects the recipients of "interested" requests created during the previous
UTC day and sends each of them one best-effort email. Delivery failures are
logged and counted, never raised.

Usage (e.g. from cron at 08:00):
    python -m app.jobs.pending_digest
"""
import asyncio
import datetime as dt
import logging
from collections import Counter

from app.core.db import init_db, close_db
from app.models.connection_request import ConnectionRequest
from app.models.user import User
from app.services.notifications import notify_pending_requests

logger = logging.getLogger("uvicorn.error")


def previous_day_window(now: dt.datetime) -> tuple[dt.datetime, dt.datetime]:
    """
    [start, end) of the UTC day before `now`, as naive UTC datetimes to match
    the timestamps Tortoise stores (use_tz off, UTC timezone).
    """
    if now.tzinfo is not None:
        now = now.astimezone(dt.timezone.utc).replace(tzinfo=None)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return today - dt.timedelta(days=1), today


async def collect_pending_recipients(start: dt.datetime, end: dt.datetime) -> Counter:
    """Recipient id -> number of interested requests created in [start, end)."""
    to_ids = await ConnectionRequest.filter(
        status="interested", created_at__gte=start, created_at__lt=end
    ).values_list("to_user_id", flat=True)
    return Counter(str(uid) for uid in to_ids)


async def run_pending_digest(now: dt.datetime | None = None) -> dict:
    start, end = previous_day_window(now or dt.datetime.now(dt.timezone.utc))
    pending = await collect_pending_recipients(start, end)
    if not pending:
        logger.info("[digest] no pending requests between %s and %s", start, end)
        return {"recipients": 0, "sent": 0, "failed": 0}

    sent = failed = 0
    users = await User.filter(id__in=list(pending))
    for user in users:
        error = await notify_pending_requests(user, pending[str(user.id)])
        if error:
            failed += 1
            logger.warning("[digest] reminder to %s failed: %s", user.id, error)
        else:
            sent += 1
    logger.info("[digest] %d recipients, %d sent, %d failed", len(users), sent, failed)
    return {"recipients": len(users), "sent": sent, "failed": failed}


async def main() -> None:
    await init_db()
    try:
        await run_pending_digest()
    finally:
        await close_db()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
