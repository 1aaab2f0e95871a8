from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.orm import Session

from spotbnb.core.config import settings
from spotbnb.core.errors import Unauthenticated
from spotbnb.core.security import decode_access_token
from spotbnb.db.session import get_db
from spotbnb.models.users import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/session", auto_error=False)


def _resolve_user(request: Request, bearer: str | None, db: Session) -> User | None:
    # An explicit Authorization header wins over the session cookie.
    token = bearer or request.cookies.get(settings.auth_cookie_name)
    if not token:
        return None

    try:
        payload = decode_access_token(token)
    except JWTError:
        logger.info("Rejected invalid session token")
        return None

    sub = payload.get("sub")
    if not sub or not str(sub).isdigit():
        return None
    return db.get(User, int(sub))


def get_optional_user(
    request: Request,
    bearer: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User | None:
    return _resolve_user(request, bearer, db)


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise Unauthenticated()
    return user
