from __future__ import annotations

from typing import TypeVar

from sqlalchemy.orm import Session

from spotbnb.core.config import settings
from spotbnb.core.errors import Forbidden, NotFound
from spotbnb.db import crud
from spotbnb.models.reviews import Review
from spotbnb.models.spots import Spot
from spotbnb.models.users import User

T = TypeVar("T")


def require_found(entity: T | None, label: str) -> T:
    if entity is None:
        raise NotFound(label)
    return entity


def require_owner(spot: Spot, user: User) -> None:
    if spot.owner_id != user.id:
        raise Forbidden()


def require_author(review: Review, user: User) -> None:
    if review.user_id != user.id:
        raise Forbidden()


def require_unique_review(db: Session, *, spot_id: int, user_id: int) -> None:
    if crud.find_review(db, spot_id=spot_id, user_id=user_id) is not None:
        raise Forbidden(crud.DUPLICATE_REVIEW_MESSAGE)


def require_image_capacity(db: Session, review: Review) -> None:
    if crud.count_review_images(db, review.id) >= settings.max_review_images:
        raise Forbidden("Maximum number of images for this resource was reached")
