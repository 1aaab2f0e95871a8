"""Derived read-model fields for spots.

Ratings and preview images are computed per request, never stored. List reads
run one grouped aggregate query and one image query for the whole batch of
spots, so the number of round trips does not grow with the list.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from spotbnb.db import crud
from spotbnb.models.reviews import Review
from spotbnb.models.spots import Spot, SpotImage
from spotbnb.models.users import User


@dataclass(frozen=True)
class RatingStats:
    count: int = 0
    total: int = 0

    @property
    def average(self) -> float | None:
        # No reviews means no rating, not zero.
        if not self.count:
            return None
        return self.total / self.count


@dataclass(frozen=True)
class SpotAggregate:
    spot: Spot
    avg_rating: float | None
    num_reviews: int
    preview_image: str | None


@dataclass(frozen=True)
class SpotDetail:
    spot: Spot
    stats: RatingStats
    images: list[SpotImage]
    owner: User


def rating_stats(db: Session, spot_ids: Iterable[int]) -> dict[int, RatingStats]:
    ids = list(set(spot_ids))
    if not ids:
        return {}

    stmt = (
        select(Review.spot_id, func.count(Review.stars), func.coalesce(func.sum(Review.stars), 0))
        .where(Review.spot_id.in_(ids))
        .group_by(Review.spot_id)
    )
    return {spot_id: RatingStats(count=int(cnt), total=int(total)) for spot_id, cnt, total in db.execute(stmt)}


def preview_images(db: Session, spot_ids: Iterable[int]) -> dict[int, str]:
    """Pick one image url per spot.

    An image flagged ``preview`` wins over unflagged ones; ties go to the
    lowest id. Spots without images are absent from the result.
    """
    ids = list(set(spot_ids))
    if not ids:
        return {}

    stmt = (
        select(SpotImage.spot_id, SpotImage.url)
        .where(SpotImage.spot_id.in_(ids))
        .order_by(SpotImage.spot_id, SpotImage.preview.desc(), SpotImage.id)
    )
    chosen: dict[int, str] = {}
    for spot_id, url in db.execute(stmt):
        chosen.setdefault(spot_id, url)
    return chosen


def summarize_spots(db: Session, spots: Sequence[Spot]) -> list[SpotAggregate]:
    ids = [s.id for s in spots]
    stats = rating_stats(db, ids)
    previews = preview_images(db, ids)

    out: list[SpotAggregate] = []
    for spot in spots:
        st = stats.get(spot.id, RatingStats())
        out.append(
            SpotAggregate(
                spot=spot,
                avg_rating=st.average,
                num_reviews=st.count,
                preview_image=previews.get(spot.id),
            )
        )
    return out


def spot_detail(db: Session, spot: Spot) -> SpotDetail:
    stats = rating_stats(db, [spot.id]).get(spot.id, RatingStats())
    images = crud.list_spot_images(db, spot.id)
    owner = db.get(User, spot.owner_id)
    return SpotDetail(spot=spot, stats=stats, images=images, owner=owner)
