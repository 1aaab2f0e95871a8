from conftest import create_spot, signup


def test_second_review_by_same_user_forbidden(client):
    owner = signup(client, "Owner")
    guest = signup(client, "Guest")
    spot = create_spot(client, owner)

    r1 = client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Lovely", "stars": 5}, headers=guest)
    assert r1.status_code == 201, r1.text
    review = r1.json()
    assert review["spotId"] == spot["id"]
    assert review["stars"] == 5

    r2 = client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Again", "stars": 3}, headers=guest)
    assert r2.status_code == 403
    assert r2.json() == {"message": "User already has a review for this spot", "statusCode": 403}


def test_duplicate_check_precedes_validation(client):
    owner = signup(client, "Owner")
    guest = signup(client, "Guest")
    spot = create_spot(client, owner)
    client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Lovely", "stars": 5}, headers=guest)

    r = client.post(f"/api/spots/{spot['id']}/reviews", json={}, headers=guest)
    assert r.status_code == 403


def test_review_on_missing_spot_404(client):
    guest = signup(client, "Guest")
    r = client.post("/api/spots/42/reviews", json={}, headers=guest)
    assert r.status_code == 404
    assert r.json()["message"] == "Spot couldn't be found"


def test_non_object_body_does_not_beat_missing_spot_or_review(client):
    guest = signup(client, "Guest")

    r = client.post("/api/spots/42/reviews", json=[], headers=guest)
    assert r.status_code == 404
    r = client.post("/api/reviews/42/images", json=[], headers=guest)
    assert r.status_code == 404


def test_non_object_review_body_is_validation_error(client):
    owner = signup(client, "Owner")
    guest = signup(client, "Guest")
    spot = create_spot(client, owner)

    r = client.post(f"/api/spots/{spot['id']}/reviews", json=["Lovely", 5], headers=guest)
    assert r.status_code == 400
    assert r.json()["error"] == "Review text is required"


def test_integral_float_stars_accepted(client):
    owner = signup(client, "Owner")
    guest = signup(client, "Guest")
    spot = create_spot(client, owner)

    r = client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Fine", "stars": 5.0}, headers=guest)
    assert r.status_code == 201, r.text
    assert r.json()["stars"] == 5


def test_review_for_spot_deleted_mid_request_is_integrity_envelope(client, monkeypatch):
    from types import SimpleNamespace

    from spotbnb.db import crud

    guest = signup(client, "Guest")
    # The spot lookup still sees a spot that no longer exists when the insert runs.
    monkeypatch.setattr(crud, "get_spot", lambda db, spot_id: SimpleNamespace(id=spot_id, owner_id=1))

    r = client.post("/api/spots/999/reviews", json={"review": "Gone", "stars": 3}, headers=guest)
    assert r.status_code == 400
    body = r.json()
    assert body["title"] == "Validation error"
    assert body["message"] == "Bad request."
    assert "FOREIGN KEY" in body["errors"][0]
    assert client.get("/api/reviews/current", headers=guest).json() == {"Reviews": []}


def test_zero_stars_rejected(client):
    owner = signup(client, "Owner")
    guest = signup(client, "Guest")
    spot = create_spot(client, owner)

    r = client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Bad", "stars": 0}, headers=guest)
    assert r.status_code == 400
    assert r.json() == {"message": "Validation Error", "statusCode": 400, "error": "Stars must be an integer from 1 to 5"}

    r = client.post(f"/api/spots/{spot['id']}/reviews", json={"stars": 3}, headers=guest)
    assert r.status_code == 400
    assert r.json()["error"] == "Review text is required"

    # Nothing was written by the rejected attempts.
    assert client.get(f"/api/spots/{spot['id']}/reviews").json() == {"Reviews": []}


def test_list_spot_reviews_with_user_and_images(client):
    owner = signup(client, "Owner")
    guest = signup(client, "Guest", first_name="Gina", last_name="Guest")
    spot = create_spot(client, owner)

    review = client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Lovely", "stars": 4}, headers=guest).json()
    img = client.post(f"/api/reviews/{review['id']}/images", json={"url": "https://img/r1.jpg"}, headers=guest)
    assert img.status_code == 200, img.text
    assert set(img.json()) == {"id", "url"}

    r = client.get(f"/api/spots/{spot['id']}/reviews")
    assert r.status_code == 200, r.text
    (item,) = r.json()["Reviews"]
    assert item["User"] == {"id": review["userId"], "firstName": "Gina", "lastName": "Guest"}
    assert item["ReviewImages"] == [img.json()]
    assert "Spot" not in item


def test_list_reviews_missing_spot_404(client):
    r = client.get("/api/spots/7/reviews")
    assert r.status_code == 404


def test_current_user_reviews_include_spot(client):
    owner = signup(client, "Owner")
    guest = signup(client, "Guest")
    spot = create_spot(client, owner)
    client.post(f"/api/spots/{spot['id']}/images", json={"url": "https://img/s.jpg"}, headers=owner)
    client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Lovely", "stars": 4}, headers=guest)

    r = client.get("/api/reviews/current", headers=guest)
    assert r.status_code == 200, r.text
    (item,) = r.json()["Reviews"]
    assert item["Spot"]["id"] == spot["id"]
    assert item["Spot"]["previewImage"] == "https://img/s.jpg"
    assert item["ReviewImages"] == []


def test_delete_review_only_by_author(client):
    owner = signup(client, "Owner")
    guest = signup(client, "Guest")
    spot = create_spot(client, owner)
    review = client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Lovely", "stars": 4}, headers=guest).json()

    assert client.delete(f"/api/reviews/{review['id']}", headers=owner).status_code == 403
    r = client.delete(f"/api/reviews/{review['id']}", headers=guest)
    assert r.status_code == 200
    assert client.delete(f"/api/reviews/{review['id']}", headers=guest).json() == {
        "message": "Review couldn't be found",
        "statusCode": 404,
    }

    # The author may review the spot again once the old review is gone.
    r = client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Second look", "stars": 3}, headers=guest)
    assert r.status_code == 201


def test_review_image_limit(client, monkeypatch):
    from spotbnb.core.config import settings

    monkeypatch.setattr(settings, "max_review_images", 2)
    owner = signup(client, "Owner")
    guest = signup(client, "Guest")
    spot = create_spot(client, owner)
    review = client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "Lovely", "stars": 4}, headers=guest).json()

    for i in range(2):
        r = client.post(f"/api/reviews/{review['id']}/images", json={"url": f"https://img/{i}.jpg"}, headers=guest)
        assert r.status_code == 200, r.text

    r = client.post(f"/api/reviews/{review['id']}/images", json={"url": "https://img/x.jpg"}, headers=guest)
    assert r.status_code == 403
    assert r.json()["message"] == "Maximum number of images for this resource was reached"


def test_detail_average_after_reviews(client):
    owner = signup(client, "Owner")
    guests = [signup(client, f"Guest{i}") for i in range(3)]
    spot = create_spot(client, owner)
    for guest, stars in zip(guests, (5, 4, 4)):
        client.post(f"/api/spots/{spot['id']}/reviews", json={"review": "x", "stars": stars}, headers=guest)

    detail = client.get(f"/api/spots/{spot['id']}").json()
    assert detail["numReviews"] == 3
    assert detail["avgStarRating"] == 13 / 3
