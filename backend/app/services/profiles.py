# app/services/profiles.py
"""
User registration, authentication and profile management.
"""
import logging

from tortoise.exceptions import IntegrityError

from app.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.core.security import hash_password, verify_password
from app.models.user import User, DEFAULT_BIO
from app.services import validators

logger = logging.getLogger("uvicorn.error")


def public_profile(u: User) -> dict:
    """Fields any authenticated user may see. Never the email or credential hash."""
    return {
        "id": str(u.id),
        "firstName": u.first_name,
        "lastName": u.last_name,
        "photoURL": u.photo_url,
        "bio": u.bio,
        "skills": list(u.skills or []),
        "age": u.age,
        "gender": u.gender,
    }


def own_profile(u: User) -> dict:
    data = public_profile(u)
    data["emailId"] = u.email
    data["createdAt"] = u.created_at.isoformat() if u.created_at else None
    return data


def sender_summary(u: User) -> dict:
    """Minimal public fields attached to chat messages."""
    return {"id": str(u.id), "firstName": u.first_name, "lastName": u.last_name}


async def register_user(
    first_name: str,
    email: str,
    password: str,
    last_name: str | None = None,
    age: int | None = None,
    gender: str | None = None,
    skills: list[str] | None = None,
    bio: str | None = None,
    photo_url: str | None = None,
) -> User:
    fields = {
        "first_name": validators.validate_first_name(first_name),
        "email": validators.validate_email(email),
        "password_hash": hash_password(validators.validate_password(password)),
        "bio": DEFAULT_BIO,
    }
    if last_name:
        fields["last_name"] = validators.validate_last_name(last_name)
    if age is not None:
        fields["age"] = validators.validate_age(age)
    if gender:
        fields["gender"] = validators.validate_gender(gender)
    if skills is not None:
        fields["skills"] = validators.validate_skills(skills)
    if bio:
        fields["bio"] = validators.validate_bio(bio)
    if photo_url:
        fields["photo_url"] = validators.validate_photo_url(photo_url)

    if await User.exists(email=fields["email"]):
        raise ConflictError("User with this email already exists", code="EMAIL_EXISTS")
    try:
        user = await User.create(**fields)
    except IntegrityError:
        # Lost a race against a concurrent registration with the same email
        raise ConflictError("User with this email already exists", code="EMAIL_EXISTS")
    logger.info("[profiles] registered user %s", user.id)
    return user


async def authenticate(email: str, password: str) -> User:
    try:
        email = validators.validate_email(email)
    except ValidationError:
        raise AuthorizationError("Invalid email or password", code="AUTH_INVALID_CREDENTIALS")
    user = await User.get_or_none(email=email)
    if not user or not verify_password(password or "", user.password_hash):
        raise AuthorizationError("Invalid email or password", code="AUTH_INVALID_CREDENTIALS")
    return user


async def get_user(user_id) -> User:
    uid = validators.parse_id(user_id, "user ID")
    user = await User.get_or_none(id=uid)
    if not user:
        raise NotFoundError("User not found")
    return user


async def update_profile(user: User, data: dict) -> User:
    cleaned = validators.validate_profile_update(data)
    if cleaned:
        for attr, value in cleaned.items():
            setattr(user, attr, value)
        await user.save()
    return user


async def change_password(user: User, current_password: str, new_password: str) -> None:
    new_password = validators.validate_password(new_password)
    if not verify_password(current_password or "", user.password_hash):
        raise AuthorizationError("Current password is incorrect", code="AUTH_INVALID_CREDENTIALS")
    user.password_hash = hash_password(new_password)
    await user.save()
