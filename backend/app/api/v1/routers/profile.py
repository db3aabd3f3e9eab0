# app/api/v1/routers/profile.py
from fastapi import APIRouter, Body, Depends
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.schemas.auth import ChangePasswordIn
from app.services import profiles

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("")
async def get_profile(user: User = Depends(get_current_user)):
    return {"success": True, "message": "Profile retrieved successfully", "data": profiles.own_profile(user)}

@router.patch("")
async def update_profile(body: dict = Body(...), user: User = Depends(get_current_user)):
    """
    Update the current user's profile.

    Only firstName, lastName, gender, skills, bio, age and photoURL may be
    changed; any other key rejects the whole request.

    Error codes:
        - VALIDATION_ERROR (400): Unknown field or invalid value
    """
    user = await profiles.update_profile(user, body)
    return {"success": True, "message": "Profile updated successfully", "data": profiles.own_profile(user)}

@router.post("/change-password")
async def change_password(body: ChangePasswordIn, user: User = Depends(get_current_user)):
    """
    Change the current user's password after verifying the current one.

    Error codes:
        - AUTH_INVALID_CREDENTIALS (401): Current password is incorrect
        - VALIDATION_ERROR (400): New password is not 6-30 characters
    """
    await profiles.change_password(user, body.currentPassword, body.newPassword)
    return {"success": True, "message": "Password changed successfully"}

@router.get("/{user_id}")
async def get_user_by_id(user_id: str):
    """Public profile of any user. No authentication required."""
    user = await profiles.get_user(user_id)
    return {"success": True, "data": profiles.public_profile(user)}
