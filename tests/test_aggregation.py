from sqlalchemy import event

from spotbnb.db.session import engine
from spotbnb.models import Review, Spot, SpotImage, User
from spotbnb.services.aggregation import RatingStats, preview_images, rating_stats, summarize_spots


def _user(db, name: str) -> User:
    user = User(email=f"{name}@example.com", username=name, first_name=name, last_name="Test", password_hash="x")
    db.add(user)
    db.flush()
    return user


def _spot(db, owner: User, name: str) -> Spot:
    spot = Spot(
        owner_id=owner.id,
        address="1 Main St",
        city="Springfield",
        state="IL",
        country="USA",
        lat=39.8,
        lng=-89.6,
        name=name,
        description="A spot",
        price=100,
    )
    db.add(spot)
    db.flush()
    return spot


def test_rating_stats_average_is_exact(db):
    owner = _user(db, "owner")
    spot = _spot(db, owner, "Rated")
    for i, stars in enumerate((5, 4, 4, 2)):
        db.add(Review(spot_id=spot.id, user_id=_user(db, f"guest{i}").id, review="r", stars=stars))
    db.commit()

    stats = rating_stats(db, [spot.id])[spot.id]
    assert stats == RatingStats(count=4, total=15)
    assert stats.average == 15 / 4


def test_no_reviews_means_no_average(db):
    owner = _user(db, "owner")
    spot = _spot(db, owner, "Quiet")
    db.commit()

    assert rating_stats(db, [spot.id]) == {}
    assert RatingStats().average is None


def test_preview_prefers_flagged_then_lowest_id(db):
    owner = _user(db, "owner")
    flagged = _spot(db, owner, "Flagged")
    unflagged = _spot(db, owner, "Unflagged")
    empty = _spot(db, owner, "Empty")
    db.add_all(
        [
            SpotImage(spot_id=flagged.id, url="a", preview=False),
            SpotImage(spot_id=flagged.id, url="b", preview=True),
            SpotImage(spot_id=flagged.id, url="c", preview=True),
            SpotImage(spot_id=unflagged.id, url="d", preview=False),
            SpotImage(spot_id=unflagged.id, url="e", preview=False),
        ]
    )
    db.commit()

    previews = preview_images(db, [flagged.id, unflagged.id, empty.id])
    assert previews == {flagged.id: "b", unflagged.id: "d"}


def test_summarize_spots_uses_constant_number_of_queries(db):
    owner = _user(db, "owner")
    spots = [_spot(db, owner, f"Spot {i}") for i in range(5)]
    for i, spot in enumerate(spots):
        db.add(SpotImage(spot_id=spot.id, url=f"img{i}", preview=False))
        db.add(Review(spot_id=spot.id, user_id=_user(db, f"guest{i}").id, review="r", stars=i + 1))
    db.commit()

    statements = []

    def _count(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _count)
    try:
        result = summarize_spots(db, spots)
    finally:
        event.remove(engine, "before_cursor_execute", _count)

    assert len(statements) == 2
    assert [a.avg_rating for a in result] == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert [a.preview_image for a in result] == [f"img{i}" for i in range(5)]
