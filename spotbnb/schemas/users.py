from __future__ import annotations

from spotbnb.schemas.base import ApiModel


class UserSummary(ApiModel):
    """Public slice of a user embedded in spots (``Owner``) and reviews (``User``)."""

    id: int
    first_name: str
    last_name: str
