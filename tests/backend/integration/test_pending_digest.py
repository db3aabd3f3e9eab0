import datetime as dt

import pytest

from app.jobs import pending_digest
from app.models.connection_request import ConnectionRequest, pair_key


async def _request(a, b, status, created_at):
    r = await ConnectionRequest.create(
        from_user_id=a.id, to_user_id=b.id, status=status, pair_key=pair_key(a.id, b.id)
    )
    # auto_now_add ignores explicit values on create; backdate with an update
    await ConnectionRequest.filter(id=r.id).update(created_at=created_at)
    return r


def test_previous_day_window():
    now = dt.datetime(2024, 5, 10, 8, 0, tzinfo=dt.timezone.utc)
    start, end = pending_digest.previous_day_window(now)
    assert start == dt.datetime(2024, 5, 9)
    assert end == dt.datetime(2024, 5, 10)


@pytest.mark.asyncio
async def test_digest_counts_yesterdays_pending_requests(create_user, monkeypatch):
    now = dt.datetime.now(dt.timezone.utc)
    start, _ = pending_digest.previous_day_window(now)
    yesterday = start + dt.timedelta(hours=12)

    a, _ = await create_user()
    b, _ = await create_user()
    c, _ = await create_user()
    d, _ = await create_user()
    await _request(a, b, "interested", yesterday)
    await _request(c, b, "interested", yesterday)
    await _request(a, c, "accepted", yesterday)          # resolved: no reminder
    await _request(d, a, "interested", start + dt.timedelta(days=1, hours=1))  # today: not in window

    sent = {}

    async def fake_notify(recipient, count):
        sent[str(recipient.id)] = count
        return None

    monkeypatch.setattr(pending_digest, "notify_pending_requests", fake_notify)

    result = await pending_digest.run_pending_digest(now)

    assert sent == {str(b.id): 2}
    assert result == {"recipients": 1, "sent": 1, "failed": 0}


@pytest.mark.asyncio
async def test_digest_counts_failures_without_raising(create_user, monkeypatch):
    now = dt.datetime.now(dt.timezone.utc)
    start, _ = pending_digest.previous_day_window(now)
    a, _ = await create_user()
    b, _ = await create_user()
    await _request(a, b, "interested", start + dt.timedelta(hours=1))

    async def failing_notify(recipient, count):
        return "Email delivery failed"

    monkeypatch.setattr(pending_digest, "notify_pending_requests", failing_notify)

    result = await pending_digest.run_pending_digest(now)
    assert result == {"recipients": 1, "sent": 0, "failed": 1}
