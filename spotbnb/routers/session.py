from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from spotbnb.core.deps import get_optional_user
from spotbnb.core.errors import InvalidCredentials
from spotbnb.core.rate_limit import limiter, rate_limit
from spotbnb.core.security import clear_auth_cookie, set_auth_cookie, verify_password
from spotbnb.db import crud
from spotbnb.db.session import get_db
from spotbnb.models.users import User
from spotbnb.schemas.auth import LoginRequest, SessionResponse, SessionUser

router = APIRouter(prefix="/api/session", tags=["session"])
logger = logging.getLogger(__name__)


def to_session_user(user: User) -> SessionUser:
    return SessionUser(
        id=user.id,
        email=user.email,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
    )


@router.get("", response_model=SessionResponse)
def restore_session(current: User | None = Depends(get_optional_user)) -> SessionResponse:
    return SessionResponse(user=to_session_user(current) if current else None)


@router.post("", response_model=SessionResponse)
def login(
    payload: LoginRequest,
    response: Response,
    throttle_key: str = rate_limit("login"),
    db: Session = Depends(get_db),
) -> SessionResponse:
    credential = payload.credential.strip()
    if "@" in credential:
        credential = credential.lower()
    user = crud.get_user_by_credential(db, credential)
    if not user or not verify_password(payload.password, user.password_hash):
        raise InvalidCredentials()

    limiter.clear(throttle_key)
    set_auth_cookie(response, user.id)
    logger.info("User %s logged in", user.id)
    return SessionResponse(user=to_session_user(user))


@router.delete("")
def logout(response: Response) -> dict[str, str]:
    clear_auth_cookie(response)
    return {"message": "success"}
