from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, StrictInt

from spotbnb.schemas.base import ApiModel, PayloadModel, RequiredText
from spotbnb.schemas.users import UserSummary

MIN_STARS = 1
MAX_STARS = 5


def _integral_stars(value: Any) -> Any:
    # 5.0 and 5 are the same rating; 4.5 is not a rating at all.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class ReviewPayload(PayloadModel):
    review: RequiredText
    stars: Annotated[StrictInt, BeforeValidator(_integral_stars), Field(ge=MIN_STARS, le=MAX_STARS)]

    error_messages = {
        "review": "Review text is required",
        "stars": "Stars must be an integer from 1 to 5",
    }


class ReviewImagePayload(PayloadModel):
    url: RequiredText

    error_messages = {"url": "Url is required"}


class ReviewResponse(ApiModel):
    id: int
    user_id: int
    spot_id: int
    review: str
    stars: int
    created_at: datetime
    updated_at: datetime


class ReviewImageResponse(ApiModel):
    id: int
    url: str


class ReviewedSpot(ApiModel):
    id: int
    owner_id: int
    address: str
    city: str
    state: str
    country: str
    lat: float
    lng: float
    name: str
    price: float
    preview_image: str | None = None


class ReviewDetail(ReviewResponse):
    user: UserSummary = Field(alias="User")
    review_images: list[ReviewImageResponse] = Field(alias="ReviewImages")
    spot: ReviewedSpot | None = Field(default=None, alias="Spot")


class ReviewListResponse(ApiModel):
    reviews: list[ReviewDetail] = Field(alias="Reviews")
