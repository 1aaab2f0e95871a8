from __future__ import annotations

import logging

from sqlalchemy import select

from spotbnb.core.config import settings
from spotbnb.core.logging_config import configure_logging
from spotbnb.core.security import get_password_hash
from spotbnb.db.base import Base
from spotbnb.db.session import SessionLocal, engine
from spotbnb.models import Review, ReviewImage, Spot, SpotImage, User

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"

USERS = [
    {"email": "demo@user.io", "username": "Demo-lition", "first_name": "Demo", "last_name": "Lition"},
    {"email": "user1@user.io", "username": "FakeUser1", "first_name": "Fake", "last_name": "User"},
    {"email": "user2@user.io", "username": "FakeUser2", "first_name": "Another", "last_name": "Fake"},
]

SPOTS = [
    {
        "owner": "Demo-lition",
        "address": "123 Disney Lane",
        "city": "San Francisco",
        "state": "California",
        "country": "United States of America",
        "lat": 37.7645358,
        "lng": -122.4730327,
        "name": "App Academy",
        "description": "Place where web developers are created",
        "price": 123,
        "images": [("https://example.com/spots/app-academy.jpg", True)],
    },
    {
        "owner": "FakeUser1",
        "address": "1 Ocean Drive",
        "city": "Miami",
        "state": "Florida",
        "country": "United States of America",
        "lat": 25.7617,
        "lng": -80.1918,
        "name": "Beach House",
        "description": "Steps from the sand",
        "price": 310,
        "images": [("https://example.com/spots/beach-1.jpg", False), ("https://example.com/spots/beach-2.jpg", False)],
    },
    {
        "owner": "FakeUser1",
        "address": "0 Equator Way",
        "city": "Null Island",
        "state": "Atlantic",
        "country": "Nowhere",
        "lat": 0,
        "lng": 0,
        "name": "Null Island Hut",
        "description": "Exactly where the map starts",
        "price": 42,
        "images": [],
    },
]

REVIEWS = [
    {"user": "FakeUser2", "spot": "App Academy", "review": "Learned a lot, slept little.", "stars": 4,
     "images": ["https://example.com/reviews/aa.jpg"]},
    {"user": "Demo-lition", "spot": "Beach House", "review": "Great view.", "stars": 5, "images": []},
    {"user": "FakeUser2", "spot": "Beach House", "review": "Too much sand.", "stars": 2, "images": []},
]


def seed_demo() -> dict:
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.scalar(select(User.id).limit(1)) is not None:
            logger.info("Database already has users, skipping seed")
            return {"users": 0, "spots": 0, "reviews": 0}

        users = {}
        for u in USERS:
            user = User(password_hash=get_password_hash(DEMO_PASSWORD), **u)
            db.add(user)
            users[u["username"]] = user
        db.flush()

        spots = {}
        for s in SPOTS:
            data = {k: v for k, v in s.items() if k not in ("owner", "images")}
            spot = Spot(owner_id=users[s["owner"]].id, **data)
            spot.images = [SpotImage(url=url, preview=preview) for url, preview in s["images"]]
            db.add(spot)
            spots[s["name"]] = spot
        db.flush()

        for r in REVIEWS:
            review = Review(
                user_id=users[r["user"]].id,
                spot_id=spots[r["spot"]].id,
                review=r["review"],
                stars=r["stars"],
            )
            review.images = [ReviewImage(url=url) for url in r["images"]]
            db.add(review)

        db.commit()
    finally:
        db.close()

    counts = {"users": len(USERS), "spots": len(SPOTS), "reviews": len(REVIEWS)}
    logger.info("Seed finished: users=%s spots=%s reviews=%s", counts["users"], counts["spots"], counts["reviews"])
    return counts


if __name__ == "__main__":
    configure_logging(log_dir=settings.log_dir, level=settings.log_level)
    seed_demo()
