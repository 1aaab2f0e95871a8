import os
import tempfile
from pathlib import Path

_tmpdir = Path(tempfile.mkdtemp(prefix="spotbnb_test_"))
_db_path = _tmpdir / "test.db"

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_db_path.as_posix()}")
os.environ.setdefault("APP_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", (_tmpdir / "logs").as_posix())

import pytest
from fastapi.testclient import TestClient

from spotbnb.core.rate_limit import limiter
from spotbnb.db.base import Base
from spotbnb.db.session import engine, SessionLocal
from spotbnb.main import create_app

import spotbnb.models  # noqa: F401


@pytest.fixture()
def clean_db():
    limiter.reset()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db(clean_db):
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(clean_db):
    app = create_app()
    with TestClient(app) as c:
        yield c


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def signup(client, username: str, *, first_name: str = "Test", last_name: str = "User") -> dict:
    """Sign up a user and return its auth header; the client keeps no cookie afterwards."""
    r = client.post(
        "/api/users",
        json={
            "firstName": first_name,
            "lastName": last_name,
            "email": f"{username.lower()}@example.com",
            "username": username,
            "password": "password123",
        },
    )
    assert r.status_code == 201, r.text
    token = r.cookies["token"]
    client.cookies.clear()
    return auth_header(token)


SPOT_PAYLOAD = {
    "address": "123 Disney Lane",
    "city": "San Francisco",
    "state": "California",
    "country": "United States of America",
    "lat": 37.7645358,
    "lng": -122.4730327,
    "name": "App Academy",
    "description": "Place where web developers are created",
    "price": 123,
}


def create_spot(client, headers: dict, **overrides) -> dict:
    r = client.post("/api/spots", json={**SPOT_PAYLOAD, **overrides}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()
