from __future__ import annotations

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from spotbnb.core.errors import Forbidden
from spotbnb.models.reviews import Review, ReviewImage
from spotbnb.models.spots import Spot, SpotImage
from spotbnb.models.users import User
from spotbnb.schemas.reviews import ReviewImagePayload, ReviewPayload
from spotbnb.schemas.spots import SpotImagePayload, SpotPayload

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "User already has a review for this spot"


# Users

def get_user_by_credential(db: Session, credential: str) -> User | None:
    return db.scalar(select(User).where(or_(User.email == credential, User.username == credential)))


def user_exists(db: Session, *, email: str, username: str) -> bool:
    stmt = select(User.id).where(or_(User.email == email, User.username == username)).limit(1)
    return db.scalar(stmt) is not None


def create_user(db: Session, *, email: str, username: str, first_name: str, last_name: str, password_hash: str) -> User:
    user = User(
        email=email,
        username=username,
        first_name=first_name,
        last_name=last_name,
        password_hash=password_hash,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_users(db: Session, user_ids: set[int]) -> dict[int, User]:
    if not user_ids:
        return {}
    return {u.id: u for u in db.scalars(select(User).where(User.id.in_(user_ids)))}


# Spots

def get_spots(db: Session, spot_ids: set[int]) -> dict[int, Spot]:
    if not spot_ids:
        return {}
    return {s.id: s for s in db.scalars(select(Spot).where(Spot.id.in_(spot_ids)))}


def list_spots(db: Session, *, owner_id: int | None = None) -> list[Spot]:
    stmt = select(Spot)
    if owner_id is not None:
        stmt = stmt.where(Spot.owner_id == owner_id)
    return list(db.scalars(stmt.order_by(Spot.id)).all())


def get_spot(db: Session, spot_id: int) -> Spot | None:
    return db.get(Spot, spot_id)


def create_spot(db: Session, *, owner_id: int, fields: SpotPayload) -> Spot:
    spot = Spot(owner_id=owner_id, **fields.model_dump())
    db.add(spot)
    db.commit()
    db.refresh(spot)
    logger.info("Spot %s created by user %s", spot.id, owner_id)
    return spot


def update_spot(db: Session, spot: Spot, fields: SpotPayload) -> Spot:
    for key, value in fields.model_dump().items():
        setattr(spot, key, value)
    db.add(spot)
    db.commit()
    db.refresh(spot)
    logger.info("Spot %s updated", spot.id)
    return spot


def delete_spot(db: Session, spot: Spot) -> None:
    spot_id = spot.id
    db.delete(spot)
    db.commit()
    logger.info("Spot %s deleted", spot_id)


def list_spot_images(db: Session, spot_id: int) -> list[SpotImage]:
    return list(db.scalars(select(SpotImage).where(SpotImage.spot_id == spot_id).order_by(SpotImage.id)).all())


def get_spot_image(db: Session, image_id: int) -> SpotImage | None:
    return db.get(SpotImage, image_id)


def add_spot_image(db: Session, *, spot_id: int, fields: SpotImagePayload) -> SpotImage:
    image = SpotImage(spot_id=spot_id, url=fields.url, preview=fields.preview)
    db.add(image)
    db.commit()
    db.refresh(image)
    logger.info("Image %s added to spot %s", image.id, spot_id)
    return image


def delete_spot_image(db: Session, image: SpotImage) -> None:
    image_id, spot_id = image.id, image.spot_id
    db.delete(image)
    db.commit()
    logger.info("Image %s removed from spot %s", image_id, spot_id)


# Reviews

def get_review(db: Session, review_id: int) -> Review | None:
    return db.get(Review, review_id)


def find_review(db: Session, *, spot_id: int, user_id: int) -> Review | None:
    return db.scalar(select(Review).where(Review.spot_id == spot_id, Review.user_id == user_id))


def list_reviews_for_spot(db: Session, spot_id: int) -> list[Review]:
    return list(db.scalars(select(Review).where(Review.spot_id == spot_id).order_by(Review.id)).all())


def list_reviews_by_user(db: Session, user_id: int) -> list[Review]:
    return list(db.scalars(select(Review).where(Review.user_id == user_id).order_by(Review.id)).all())


def create_review(db: Session, *, spot_id: int, user_id: int, fields: ReviewPayload) -> Review:
    review = Review(spot_id=spot_id, user_id=user_id, review=fields.review, stars=fields.stars)
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Lost a race with a concurrent insert for the same (user, spot).
        if find_review(db, spot_id=spot_id, user_id=user_id) is not None:
            raise Forbidden(DUPLICATE_REVIEW_MESSAGE)
        raise
    db.refresh(review)
    logger.info("Review %s created by user %s for spot %s", review.id, user_id, spot_id)
    return review


def delete_review(db: Session, review: Review) -> None:
    review_id = review.id
    db.delete(review)
    db.commit()
    logger.info("Review %s deleted", review_id)


def images_for_reviews(db: Session, review_ids: list[int]) -> dict[int, list[ReviewImage]]:
    grouped: dict[int, list[ReviewImage]] = {rid: [] for rid in review_ids}
    if not review_ids:
        return grouped
    stmt = select(ReviewImage).where(ReviewImage.review_id.in_(review_ids)).order_by(ReviewImage.id)
    for image in db.scalars(stmt):
        grouped[image.review_id].append(image)
    return grouped


def count_review_images(db: Session, review_id: int) -> int:
    stmt = select(func.count(ReviewImage.id)).where(ReviewImage.review_id == review_id)
    return int(db.scalar(stmt) or 0)


def get_review_image(db: Session, image_id: int) -> ReviewImage | None:
    return db.get(ReviewImage, image_id)


def add_review_image(db: Session, *, review_id: int, fields: ReviewImagePayload) -> ReviewImage:
    image = ReviewImage(review_id=review_id, url=fields.url)
    db.add(image)
    db.commit()
    db.refresh(image)
    logger.info("Image %s added to review %s", image.id, review_id)
    return image


def delete_review_image(db: Session, image: ReviewImage) -> None:
    image_id, review_id = image.id, image.review_id
    db.delete(image)
    db.commit()
    logger.info("Image %s removed from review %s", image_id, review_id)
