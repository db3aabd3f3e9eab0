from fastapi import Header, HTTPException, Request, status
from app.core.security import ACCESS_COOKIE, token_subject
from app.models.user import User

async def _load_user(user_id: str) -> User | None:
    try:
        return await User.get_or_none(id=user_id)
    except (ValueError, TypeError):
        # sub is not a UUID
        return None

async def resolve_token(token: str | None) -> User | None:
    """
    Resolve an access token to a user, or None if the token is missing,
    invalid, expired, or names a user that no longer exists.
    Used by the chat WebSocket handshake, which closes instead of raising.
    """
    user_id = token_subject(token)
    if not user_id:
        return None
    return await _load_user(user_id)

async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
):
    """
    FastAPI dependency to get the current authenticated user.

    The token is read from:
    1. Authorization header (Bearer token) - preferred
    2. HttpOnly cookie (accessToken) - fallback for browser clients

    Raises:
        HTTPException (401): AUTH_REQUIRED, AUTH_INVALID_TOKEN or AUTH_USER_NOT_FOUND
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        token = request.cookies.get(ACCESS_COOKIE)

    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")

    user_id = token_subject(token)
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    user = await _load_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_USER_NOT_FOUND")
    return user
