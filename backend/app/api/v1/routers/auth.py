# app/api/v1/routers/auth.py
from fastapi import APIRouter, Depends, Response, status
from app.api.v1.deps import get_current_user
from app.core.security import ACCESS_COOKIE, ACCESS_COOKIE_MAX_AGE, create_access_token
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterIn
from app.services import profiles

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn):
    """
    Register a new user account.

    Validates and normalises the profile fields, hashes the password and
    stores the user. Email addresses are unique (case-insensitive).

    Returns:
        dict: {"success": True, "data": <own profile>}

    Error codes:
        - VALIDATION_ERROR (400): A field failed validation
        - EMAIL_EXISTS (400): Email already registered
    """
    user = await profiles.register_user(
        first_name=body.firstName,
        last_name=body.lastName,
        email=body.emailId,
        password=body.password,
        age=body.age,
        gender=body.gender,
        skills=body.skills,
        bio=body.bio,
        photo_url=body.photoURL,
    )
    return {"success": True, "message": "User registered successfully", "data": profiles.own_profile(user)}

@router.post("/login")
async def login(payload: LoginRequest, response: Response):
    """
    Authenticate user and create access token.

    The token is returned in the response body and also set as an HttpOnly
    cookie for browser-based clients.

    Error codes:
        - AUTH_INVALID_CREDENTIALS (401): Unknown email or wrong password
    """
    user = await profiles.authenticate(payload.emailId, payload.password)
    token = create_access_token(str(user.id))
    response.set_cookie(
        ACCESS_COOKIE, token, max_age=ACCESS_COOKIE_MAX_AGE, httponly=True, secure=False, samesite="lax"
    )
    return {"success": True, "data": {"user": profiles.own_profile(user), "accessToken": token}}

@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"success": True, "data": profiles.own_profile(user)}

@router.post("/logout")
async def logout(response: Response):
    """
    Log out by clearing the access token cookie.

    Note:
        The JWT itself remains valid until it expires.
    """
    response.delete_cookie(ACCESS_COOKIE)
    return {"success": True, "message": "Logged out successfully"}
