from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spotbnb.db.base import Base


class Review(Base):
    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    spot_id: Mapped[int] = mapped_column(Integer, ForeignKey("spots.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    review: Mapped[str] = mapped_column(String(2000), nullable=False)
    stars: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    spot: Mapped["Spot"] = relationship(back_populates="reviews")
    user: Mapped["User"] = relationship(back_populates="reviews")
    images: Mapped[list["ReviewImage"]] = relationship(
        back_populates="review", cascade="all, delete-orphan", order_by="ReviewImage.id"
    )

    __table_args__ = (
        CheckConstraint("stars >= 1 AND stars <= 5", name="ck_reviews_stars_range"),
        # One review per user per spot.
        UniqueConstraint("user_id", "spot_id", name="uq_reviews_user_spot"),
    )


class ReviewImage(Base):
    __tablename__ = "review_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    review_id: Mapped[int] = mapped_column(Integer, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False, index=True)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    review: Mapped[Review] = relationship(back_populates="images")
