# app/api/v1/routers/user.py
from fastapi import APIRouter, Depends, Query
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.services import connections

router = APIRouter(prefix="/user", tags=["user"])

@router.get("/requests/received")
async def received_requests(user: User = Depends(get_current_user)):
    """Pending incoming requests joined with each sender's public profile."""
    items = await connections.list_received(user)
    return {"success": True, "count": len(items), "data": items}

@router.get("/connections")
async def user_connections(user: User = Depends(get_current_user)):
    """Public profiles of every accepted connection."""
    items = await connections.list_connections(user)
    return {"success": True, "count": len(items), "data": items}

@router.get("/feed")
async def user_feed(
    user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(connections.FEED_DEFAULT_LIMIT, ge=1),
    skills: str | None = Query(default=None, description="Comma-separated skills, any match"),
    gender: str | None = Query(default=None),
):
    """
    Discovery feed: users the caller has never sent to or received a request
    from, newest first.

    Returns:
        dict: items plus count / total / currentPage / totalPages
    """
    skill_list = [s for s in skills.split(",") if s.strip()] if skills else None
    data = await connections.discovery_feed(user, page=page, limit=limit, skills=skill_list, gender=gender)
    return {"success": True, "data": data}
