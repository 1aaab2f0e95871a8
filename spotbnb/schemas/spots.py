from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import Field, StrictBool, StrictStr, StringConstraints, field_validator

from spotbnb.schemas.base import ApiModel, FiniteNumber, PayloadModel, RequiredText
from spotbnb.schemas.users import UserSummary

SPOT_NAME_MAX_LENGTH = 50


class SpotPayload(PayloadModel):
    address: RequiredText
    city: RequiredText
    state: RequiredText
    country: RequiredText
    lat: Annotated[FiniteNumber, Field(strict=True, ge=-90, le=90, allow_inf_nan=False)]
    lng: Annotated[FiniteNumber, Field(strict=True, ge=-180, le=180, allow_inf_nan=False)]
    name: Annotated[
        StrictStr, StringConstraints(strip_whitespace=True, min_length=1, max_length=SPOT_NAME_MAX_LENGTH)
    ]
    description: RequiredText
    price: Annotated[FiniteNumber, Field(strict=True, gt=0, allow_inf_nan=False)]

    error_messages = {
        "address": "Street address is required",
        "city": "City is required",
        "state": "State is required",
        "country": "Country is required",
        "lat": "Latitude is not valid",
        "lng": "Longitude is not valid",
        "name": "Name is required and must be less than 50 characters",
        "description": "Description is required",
        "price": "Price per day is required",
    }


class SpotImagePayload(PayloadModel):
    url: RequiredText
    preview: StrictBool = False

    error_messages = {
        "url": "Url is required",
        "preview": "Preview must be a boolean",
    }

    @field_validator("preview", mode="before")
    @classmethod
    def null_preview_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class SpotResponse(ApiModel):
    id: int
    owner_id: int
    address: str
    city: str
    state: str
    country: str
    lat: float
    lng: float
    name: str
    description: str
    price: float
    created_at: datetime
    updated_at: datetime


class SpotListItem(SpotResponse):
    avg_rating: float | None
    # Left unset (and so omitted from the JSON) when the spot has no images.
    preview_image: str | None = None


class SpotListResponse(ApiModel):
    spots: list[SpotListItem] = Field(alias="Spots")


class SpotImageResponse(ApiModel):
    id: int
    url: str
    preview: bool


class SpotDetailResponse(SpotResponse):
    num_reviews: int
    avg_star_rating: float | None
    spot_images: list[SpotImageResponse] = Field(alias="SpotImages")
    owner: UserSummary = Field(alias="Owner")
