# app/services/connections.py
"""
Connection request engine.

Owns the directed request between two users, its state machine and the
symmetric-pair uniqueness rule:

    send:    (none) -> interested | ignored          by the sender
    review:  interested -> accepted | rejected       by the recipient only

accepted / rejected are terminal. Requests are never deleted; every request,
whatever its status, hides the counterpart from the discovery feed.
"""
import logging
import math

from tortoise import timezone
from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q

from app.config import settings
from app.core.errors import ConflictError, NotFoundError, SelfReferenceError, ValidationError
from app.models.connection_request import (
    ConnectionRequest,
    REVIEW_STATUSES,
    SEND_STATUSES,
    pair_key,
)
from app.models.user import User
from app.services.notifications import notify_connection_request
from app.services.profiles import public_profile
from app.services.validators import parse_id

logger = logging.getLogger("uvicorn.error")

FEED_DEFAULT_LIMIT = 10


def request_to_dict(r: ConnectionRequest) -> dict:
    return {
        "id": str(r.id),
        "fromUserId": str(r.from_user_id),
        "toUserId": str(r.to_user_id),
        "status": r.status,
        "createdAt": r.created_at.isoformat() if r.created_at else None,
        "updatedAt": r.updated_at.isoformat() if r.updated_at else None,
    }


async def send_request(sender: User, to_user_id, status: str) -> tuple[ConnectionRequest, str | None]:
    """
    Create a request from `sender` to `to_user_id` with the given intent.

    Returns:
        (request, notification_error) where notification_error is the message
        of a failed best-effort email, or None.

    Raises:
        ValidationError: status not interested/ignored, or malformed user id
        SelfReferenceError: sender targets themself
        NotFoundError: target user does not exist
        ConflictError: a request already exists for the pair, in either direction
    """
    if status not in SEND_STATUSES:
        raise ValidationError(f"Invalid status: {status}", code="INVALID_STATUS")
    target_id = parse_id(to_user_id, "user ID")
    if target_id == sender.id:
        raise SelfReferenceError("Cannot send request to yourself")

    target = await User.get_or_none(id=target_id)
    if not target:
        raise NotFoundError("User not found")

    key = pair_key(sender.id, target.id)
    if await ConnectionRequest.exists(pair_key=key):
        raise ConflictError("Request already exists between these users")
    try:
        request = await ConnectionRequest.create(
            from_user_id=sender.id,
            to_user_id=target.id,
            status=status,
            pair_key=key,
        )
    except IntegrityError:
        # Concurrent send for the same pair won the unique pair_key
        raise ConflictError("Request already exists between these users")
    logger.info("[connections] %s -> %s marked %s (request %s)", sender.id, target.id, status, request.id)

    notification_error = None
    if status == "interested":
        notification_error = await notify_connection_request(sender, target)
    return request, notification_error


async def review_request(recipient: User, request_id, status: str) -> ConnectionRequest:
    """
    Resolve a pending request addressed to `recipient`.

    The update is conditional on (id, to_user, status=interested), so a request
    addressed to someone else, an already resolved request and an unknown id all
    fail the same way.
    """
    if status not in REVIEW_STATUSES:
        raise ValidationError(f"Invalid review status: {status}", code="INVALID_STATUS")
    rid = parse_id(request_id, "request ID")

    updated = await ConnectionRequest.filter(
        id=rid, to_user_id=recipient.id, status="interested"
    ).update(status=status, updated_at=timezone.now())
    if not updated:
        raise NotFoundError("Request not found")
    logger.info("[connections] request %s %s by %s", rid, status, recipient.id)
    return await ConnectionRequest.get(id=rid)


async def list_received(user: User) -> list[dict]:
    """Pending incoming requests, each joined with the sender's public profile."""
    rows = await (
        ConnectionRequest.filter(to_user_id=user.id, status="interested")
        .order_by("-created_at")
        .prefetch_related("from_user")
    )
    out = []
    for r in rows:
        item = request_to_dict(r)
        item["fromUser"] = public_profile(r.from_user)
        out.append(item)
    return out


async def list_connections(user: User) -> list[dict]:
    """Public profiles of every user with an accepted request involving `user`."""
    rows = await (
        ConnectionRequest.filter(Q(from_user_id=user.id) | Q(to_user_id=user.id), status="accepted")
        .order_by("-updated_at")
        .prefetch_related("from_user", "to_user")
    )
    return [
        public_profile(r.to_user if str(r.from_user_id) == str(user.id) else r.from_user)
        for r in rows
    ]


async def is_connected(a, b) -> bool:
    """True iff an accepted request exists between a and b, in either direction."""
    return await ConnectionRequest.exists(pair_key=pair_key(a, b), status="accepted")


async def excluded_user_ids(user: User) -> set:
    """The user itself plus every counterpart of any request involving them."""
    pairs = await ConnectionRequest.filter(
        Q(from_user_id=user.id) | Q(to_user_id=user.id)
    ).values_list("from_user_id", "to_user_id")
    excluded = {user.id}
    for from_id, to_id in pairs:
        excluded.add(parse_id(from_id))
        excluded.add(parse_id(to_id))
    return excluded


async def discovery_feed(
    user: User,
    page: int = 1,
    limit: int = FEED_DEFAULT_LIMIT,
    skills: list[str] | None = None,
    gender: str | None = None,
) -> dict:
    """
    A page of users `user` has not interacted with yet, newest first.

    Skills match by any overlap with the requested set; gender by equality.
    `limit` is capped at FEED_MAX_LIMIT.
    """
    if page < 1:
        raise ValidationError("page must be >= 1")
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    limit = min(limit, settings.feed_max_limit)

    qs = User.exclude(id__in=list(await excluded_user_ids(user))).order_by("-created_at")
    if gender:
        qs = qs.filter(gender=gender.strip().lower())

    offset = (page - 1) * limit
    wanted = {s.strip().lower() for s in (skills or []) if s.strip()}
    if wanted:
        # Skills live in a JSON column; overlap is evaluated here, not in SQL
        matched = [
            u for u in await qs
            if wanted & {s.lower() for s in (u.skills or [])}
        ]
        total = len(matched)
        users = matched[offset:offset + limit]
    else:
        total = await qs.count()
        users = await qs.offset(offset).limit(limit)

    return {
        "items": [public_profile(u) for u in users],
        "count": len(users),
        "total": total,
        "currentPage": page,
        "totalPages": math.ceil(total / limit) if total else 0,
        "limit": limit,
    }
