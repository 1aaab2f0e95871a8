from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from spotbnb.core.deps import get_current_user
from spotbnb.db import crud
from spotbnb.db.session import get_db
from spotbnb.models.spots import Spot, SpotImage
from spotbnb.models.users import User
from spotbnb.schemas.base import MessageResponse
from spotbnb.schemas.spots import (
    SpotDetailResponse,
    SpotImageResponse,
    SpotListItem,
    SpotListResponse,
    SpotResponse,
)
from spotbnb.schemas.users import UserSummary
from spotbnb.services.aggregation import SpotAggregate, spot_detail, summarize_spots
from spotbnb.services.authorization import require_found, require_owner
from spotbnb.services.validation import validate_spot_image_payload, validate_spot_payload

router = APIRouter(prefix="/api/spots", tags=["spots"])

SPOT = "Spot"


def _spot_fields(spot: Spot) -> dict[str, Any]:
    return {
        "id": spot.id,
        "owner_id": spot.owner_id,
        "address": spot.address,
        "city": spot.city,
        "state": spot.state,
        "country": spot.country,
        "lat": spot.lat,
        "lng": spot.lng,
        "name": spot.name,
        "description": spot.description,
        "price": spot.price,
        "created_at": spot.created_at,
        "updated_at": spot.updated_at,
    }


def _to_spot_response(spot: Spot) -> SpotResponse:
    return SpotResponse(**_spot_fields(spot))


def _to_list_item(agg: SpotAggregate) -> SpotListItem:
    extra: dict[str, Any] = {"avg_rating": agg.avg_rating}
    if agg.preview_image is not None:
        extra["preview_image"] = agg.preview_image
    return SpotListItem(**_spot_fields(agg.spot), **extra)


def _to_image_response(image: SpotImage) -> SpotImageResponse:
    return SpotImageResponse(id=image.id, url=image.url, preview=image.preview)


@router.get("", response_model=SpotListResponse, response_model_exclude_unset=True)
def list_spots(db: Session = Depends(get_db)) -> SpotListResponse:
    spots = crud.list_spots(db)
    return SpotListResponse(spots=[_to_list_item(a) for a in summarize_spots(db, spots)])


@router.get("/current", response_model=SpotListResponse, response_model_exclude_unset=True)
def list_own_spots(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotListResponse:
    spots = crud.list_spots(db, owner_id=current.id)
    return SpotListResponse(spots=[_to_list_item(a) for a in summarize_spots(db, spots)])


@router.get("/{spot_id}", response_model=SpotDetailResponse)
def get_spot(spot_id: int, db: Session = Depends(get_db)) -> SpotDetailResponse:
    spot = require_found(crud.get_spot(db, spot_id), SPOT)
    detail = spot_detail(db, spot)
    return SpotDetailResponse(
        **_spot_fields(spot),
        num_reviews=detail.stats.count,
        avg_star_rating=detail.stats.average,
        spot_images=[_to_image_response(i) for i in detail.images],
        owner=UserSummary(id=detail.owner.id, first_name=detail.owner.first_name, last_name=detail.owner.last_name),
    )


@router.post("", response_model=SpotResponse, status_code=status.HTTP_201_CREATED)
def create_spot(
    payload: Any = Body(default=None),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotResponse:
    fields = validate_spot_payload(payload)
    spot = crud.create_spot(db, owner_id=current.id, fields=fields)
    return _to_spot_response(spot)


@router.post("/{spot_id}/images", response_model=SpotImageResponse)
def add_spot_image(
    spot_id: int,
    payload: Any = Body(default=None),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotImageResponse:
    spot = require_found(crud.get_spot(db, spot_id), SPOT)
    require_owner(spot, current)
    fields = validate_spot_image_payload(payload)
    image = crud.add_spot_image(db, spot_id=spot.id, fields=fields)
    return _to_image_response(image)


@router.put("/{spot_id}", response_model=SpotResponse)
def update_spot(
    spot_id: int,
    payload: Any = Body(default=None),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotResponse:
    spot = require_found(crud.get_spot(db, spot_id), SPOT)
    require_owner(spot, current)
    fields = validate_spot_payload(payload)
    return _to_spot_response(crud.update_spot(db, spot, fields))


@router.delete("/{spot_id}", response_model=MessageResponse)
def delete_spot(
    spot_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    spot = require_found(crud.get_spot(db, spot_id), SPOT)
    require_owner(spot, current)
    crud.delete_spot(db, spot)
    return MessageResponse(message="Successfully deleted", status_code=200)
