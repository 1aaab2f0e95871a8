from __future__ import annotations

from datetime import datetime, timedelta

from fastapi import Response
from jose import jwt
from passlib.context import CryptContext

from spotbnb.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject: str, *, expires_minutes: int | None = None) -> str:
    expire = datetime.utcnow() + timedelta(minutes=expires_minutes or settings.access_token_exp_minutes)
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, settings.app_secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.app_secret_key, algorithms=[ALGORITHM])


def set_auth_cookie(response: Response, user_id: int) -> str:
    """Issue a token for ``user_id`` and attach it as the session cookie."""
    token = create_access_token(str(user_id))
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.access_token_exp_minutes * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax" if settings.is_production else None,
    )
    return token


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.auth_cookie_name)
