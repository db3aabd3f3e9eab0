# app/models/connection_request.py
"""
Database model for connection requests.
A directed proposal from one user to another. The unordered pair is stored as a
canonical pair_key with a unique constraint, so at most one request can exist for
{A, B} regardless of direction.
"""
import uuid
from tortoise import fields, models

# Statuses a sender may create a request with
SEND_STATUSES = ("interested", "ignored")
# Statuses a recipient may resolve an "interested" request to
REVIEW_STATUSES = ("accepted", "rejected")
STATUSES = SEND_STATUSES + REVIEW_STATUSES

def pair_key(a, b) -> str:
    """Canonical key for the unordered pair {a, b}."""
    first, second = sorted((str(a), str(b)))
    return f"{first}:{second}"

class ConnectionRequest(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    # References are not enforced by the database (db_constraint=False)
    from_user = fields.ForeignKeyField(
        "models.User", related_name="sent_requests", db_constraint=False
    )
    to_user = fields.ForeignKeyField(
        "models.User", related_name="received_requests", db_constraint=False
    )
    status = fields.CharField(max_length=16, index=True)  # interested / ignored / accepted / rejected
    pair_key = fields.CharField(max_length=80, unique=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "connection_requests"
