# app/api/v1/routers/requests.py
from fastapi import APIRouter, Depends
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.services import connections

router = APIRouter(prefix="/request", tags=["requests"])

@router.post("/send/{status}/{to_user_id}")
async def send_request(status: str, to_user_id: str, user: User = Depends(get_current_user)):
    """
    Send a connection request (or record a pass) to another user.

    Args:
        status: "interested" or "ignored"
        to_user_id: Target user id

    Returns:
        dict: Created request plus notificationError (null unless the
        best-effort email to the recipient failed)

    Error codes:
        - INVALID_STATUS / VALIDATION_ERROR (400)
        - SELF_REFERENCE (400): Target is the caller
        - REQUEST_EXISTS (400): A request already exists between the pair
        - NOT_FOUND (404): Target user does not exist
    """
    request, notification_error = await connections.send_request(user, to_user_id, status)
    return {
        "success": True,
        "message": f"Connection request {status}",
        "data": connections.request_to_dict(request),
        "notificationError": notification_error,
    }

@router.post("/review/{status}/{request_id}")
async def review_request(status: str, request_id: str, user: User = Depends(get_current_user)):
    """
    Accept or reject a pending request addressed to the caller.

    Error codes:
        - INVALID_STATUS (400): status is not accepted/rejected
        - NOT_FOUND (404): No pending request with this id addressed to the caller
    """
    request = await connections.review_request(user, request_id, status)
    return {
        "success": True,
        "message": f"Connection request {status} successfully",
        "data": connections.request_to_dict(request),
    }
