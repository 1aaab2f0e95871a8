from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from spotbnb.core.errors import Conflict
from spotbnb.core.rate_limit import rate_limit
from spotbnb.core.security import get_password_hash, set_auth_cookie
from spotbnb.db import crud
from spotbnb.db.session import get_db
from spotbnb.routers.session import to_session_user
from spotbnb.schemas.auth import SessionResponse, SignupRequest

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[rate_limit("signup")],
)
def signup(payload: SignupRequest, response: Response, db: Session = Depends(get_db)) -> SessionResponse:
    email = payload.email.lower()
    username = payload.username.strip()
    if crud.user_exists(db, email=email, username=username):
        raise Conflict("User with that email or username already exists")

    user = crud.create_user(
        db,
        email=email,
        username=username,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        password_hash=get_password_hash(payload.password),
    )

    set_auth_cookie(response, user.id)
    logger.info("User %s signed up", user.id)
    return SessionResponse(user=to_session_user(user))
