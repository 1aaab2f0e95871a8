from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from spotbnb.core.deps import get_current_user
from spotbnb.db import crud
from spotbnb.db.session import get_db
from spotbnb.models.reviews import Review, ReviewImage
from spotbnb.models.spots import Spot
from spotbnb.models.users import User
from spotbnb.schemas.base import MessageResponse
from spotbnb.schemas.reviews import (
    ReviewDetail,
    ReviewedSpot,
    ReviewImageResponse,
    ReviewListResponse,
    ReviewResponse,
)
from spotbnb.schemas.users import UserSummary
from spotbnb.services.aggregation import preview_images
from spotbnb.services.authorization import (
    require_author,
    require_found,
    require_image_capacity,
    require_unique_review,
)
from spotbnb.services.validation import validate_review_image_payload, validate_review_payload

router = APIRouter(prefix="/api", tags=["reviews"])


def _review_fields(r: Review) -> dict[str, Any]:
    return {
        "id": r.id,
        "user_id": r.user_id,
        "spot_id": r.spot_id,
        "review": r.review,
        "stars": r.stars,
        "created_at": r.created_at,
        "updated_at": r.updated_at,
    }


def _to_review_response(r: Review) -> ReviewResponse:
    return ReviewResponse(**_review_fields(r))


def _to_image_response(image: ReviewImage) -> ReviewImageResponse:
    return ReviewImageResponse(id=image.id, url=image.url)


def _to_reviewed_spot(spot: Spot, preview: str | None) -> ReviewedSpot:
    fields: dict[str, Any] = {
        "id": spot.id,
        "owner_id": spot.owner_id,
        "address": spot.address,
        "city": spot.city,
        "state": spot.state,
        "country": spot.country,
        "lat": spot.lat,
        "lng": spot.lng,
        "name": spot.name,
        "price": spot.price,
    }
    if preview is not None:
        fields["preview_image"] = preview
    return ReviewedSpot(**fields)


def _review_details(db: Session, reviews: list[Review], *, with_spot: bool = False) -> list[ReviewDetail]:
    """Attach author, images and optionally the spot, batching each lookup."""
    users = crud.get_users(db, {r.user_id for r in reviews})
    images = crud.images_for_reviews(db, [r.id for r in reviews])
    spots = crud.get_spots(db, {r.spot_id for r in reviews}) if with_spot else {}
    previews = preview_images(db, spots.keys()) if with_spot else {}

    out: list[ReviewDetail] = []
    for r in reviews:
        author = users[r.user_id]
        extra: dict[str, Any] = {}
        if with_spot:
            extra["spot"] = _to_reviewed_spot(spots[r.spot_id], previews.get(r.spot_id))
        out.append(
            ReviewDetail(
                **_review_fields(r),
                user=UserSummary(id=author.id, first_name=author.first_name, last_name=author.last_name),
                review_images=[_to_image_response(i) for i in images[r.id]],
                **extra,
            )
        )
    return out


@router.get("/spots/{spot_id}/reviews", response_model=ReviewListResponse, response_model_exclude_unset=True)
def list_spot_reviews(spot_id: int, db: Session = Depends(get_db)) -> ReviewListResponse:
    require_found(crud.get_spot(db, spot_id), "Spot")
    reviews = crud.list_reviews_for_spot(db, spot_id)
    return ReviewListResponse(reviews=_review_details(db, reviews))


@router.post("/spots/{spot_id}/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    spot_id: int,
    payload: Any = Body(default=None),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewResponse:
    spot = require_found(crud.get_spot(db, spot_id), "Spot")
    require_unique_review(db, spot_id=spot.id, user_id=current.id)
    fields = validate_review_payload(payload)
    review = crud.create_review(db, spot_id=spot.id, user_id=current.id, fields=fields)
    return _to_review_response(review)


@router.get("/reviews/current", response_model=ReviewListResponse, response_model_exclude_unset=True)
def list_own_reviews(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewListResponse:
    reviews = crud.list_reviews_by_user(db, current.id)
    return ReviewListResponse(reviews=_review_details(db, reviews, with_spot=True))


@router.delete("/reviews/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    review = require_found(crud.get_review(db, review_id), "Review")
    require_author(review, current)
    crud.delete_review(db, review)
    return MessageResponse(message="Successfully deleted", status_code=200)


@router.post("/reviews/{review_id}/images", response_model=ReviewImageResponse)
def add_review_image(
    review_id: int,
    payload: Any = Body(default=None),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewImageResponse:
    review = require_found(crud.get_review(db, review_id), "Review")
    require_author(review, current)
    require_image_capacity(db, review)
    fields = validate_review_image_payload(payload)
    image = crud.add_review_image(db, review_id=review.id, fields=fields)
    return _to_image_response(image)
