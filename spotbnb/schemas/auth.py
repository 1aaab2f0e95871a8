from __future__ import annotations

from pydantic import EmailStr, Field

from spotbnb.schemas.base import ApiModel


class SignupRequest(ApiModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    username: str = Field(min_length=4, max_length=30)
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(ApiModel):
    # Email or username.
    credential: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1, max_length=128)


class SessionUser(ApiModel):
    id: int
    email: EmailStr
    username: str
    first_name: str
    last_name: str


class SessionResponse(ApiModel):
    user: SessionUser | None
