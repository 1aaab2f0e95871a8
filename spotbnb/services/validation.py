"""Request body parsing for spot, review and image writes.

Handlers call these after the existence and ownership checks, so a bad body
never hides a 404 or a 403. Only the first failing field is reported, using
the message the payload model declares for it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic

from spotbnb.core.errors import ValidationError
from spotbnb.schemas.base import PayloadModel
from spotbnb.schemas.reviews import ReviewImagePayload, ReviewPayload
from spotbnb.schemas.spots import SpotImagePayload, SpotPayload

PayloadT = TypeVar("PayloadT", bound=PayloadModel)


def parse_payload(model: type[PayloadT], payload: Any) -> PayloadT:
    # A missing body, a JSON array or a bare scalar all read as "no fields".
    data = payload if isinstance(payload, Mapping) else {}
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        field = str(exc.errors()[0]["loc"][0])
        raise ValidationError(model.error_messages[field]) from None


def validate_spot_payload(payload: Any) -> SpotPayload:
    return parse_payload(SpotPayload, payload)


def validate_review_payload(payload: Any) -> ReviewPayload:
    return parse_payload(ReviewPayload, payload)


def validate_spot_image_payload(payload: Any) -> SpotImagePayload:
    return parse_payload(SpotImagePayload, payload)


def validate_review_image_payload(payload: Any) -> ReviewImagePayload:
    return parse_payload(ReviewImagePayload, payload)
