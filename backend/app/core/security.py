# app/core/security.py
"""
Credentials for CodeMate: argon2 password hashes and HS256 access tokens.

The same token authenticates REST calls (Authorization header or the
accessToken cookie) and the chat WebSocket handshake.
"""
import os
import datetime as dt
from pathlib import Path

import jwt  # PyJWT
from dotenv import load_dotenv
from passlib.context import CryptContext

ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 days
JWT_ALG = "HS256"

ACCESS_COOKIE = "accessToken"
ACCESS_COOKIE_MAX_AGE = ACCESS_TOKEN_EXPIRE_MINUTES * 60


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: str) -> str:
    """Signed token with sub (user id), iat and exp claims."""
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    """
    Raises:
        jwt.ExpiredSignatureError: token has expired
        jwt.InvalidTokenError: token is malformed or signed with another secret
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])


def token_subject(token: str | None) -> str | None:
    """User id carried by `token`, or None when it is missing or does not verify."""
    if not token:
        return None
    try:
        subject = decode_access_token(token).get("sub")
    except jwt.InvalidTokenError:
        return None
    return str(subject) if subject else None
