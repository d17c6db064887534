from __future__ import annotations

import pytest
from sqlmodel import Session, select

from homeledger import auth, create_app
from homeledger.constants import DEFAULT_CATEGORIES
from homeledger.models import Asset, Category, User


@pytest.fixture()
def firebase_client(tmp_path, monkeypatch: pytest.MonkeyPatch, db_engine):
    monkeypatch.setenv("HOMELEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HOMELEDGER_DATABASE_URL", db_engine.url.render_as_string(hide_password=False))
    monkeypatch.setenv("HOMELEDGER_AUTH_MODE", "firebase")
    monkeypatch.setattr(
        auth,
        "decode_firebase_token",
        lambda token, config: {"uid": f"uid-{token}", "email": f"{token}@example.com", "name": "Fresh"},
    )
    app = create_app("testing")
    with app.test_client() as client:
        yield client


def test_signup_creates_user_with_defaults(firebase_client, db_engine):
    response = firebase_client.post(
        "/api/users", json={"displayName": "Pat"}, headers={"Authorization": "Bearer pat"}
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["firebaseUid"] == "uid-pat"
    assert body["email"] == "pat@example.com"
    assert body["displayName"] == "Pat"

    with Session(db_engine) as session:
        user = session.exec(select(User).where(User.firebase_uid == "uid-pat")).one()
        categories = session.exec(select(Category).where(Category.user_id == user.id)).all()
        assets = session.exec(select(Asset).where(Asset.user_id == user.id)).all()
    assert len(categories) == len(DEFAULT_CATEGORIES)
    assert [(asset.name, asset.type) for asset in assets] == [("Cash", "CASH")]


def test_signup_twice_returns_existing_user(firebase_client, db_engine):
    first = firebase_client.post("/api/users", headers={"Authorization": "Bearer sam"})
    second = firebase_client.post("/api/users", headers={"Authorization": "Bearer sam"})

    assert first.status_code == 201
    assert second.status_code == 200
    assert first.get_json()["id"] == second.get_json()["id"]
    with Session(db_engine) as session:
        assert len(session.exec(select(Category)).all()) == len(DEFAULT_CATEGORIES)


def test_signup_requires_token(firebase_client):
    response = firebase_client.post("/api/users")

    assert response.status_code == 401


def test_me_after_signup(firebase_client):
    firebase_client.post("/api/users", headers={"Authorization": "Bearer kim"})

    response = firebase_client.get("/api/users/me", headers={"Authorization": "Bearer kim"})

    assert response.status_code == 200
    assert response.get_json()["firebaseUid"] == "uid-kim"


def test_shared_mode_signup_returns_shared_user(api, user):
    response = api.post("/api/users")

    assert response.status_code == 200
    assert response.get_json()["id"] == str(user.id)


def test_shared_mode_signup_seeds_defaults_once(api, user, db_engine):
    api.post("/api/users")
    api.post("/api/users")

    with Session(db_engine) as session:
        categories = session.exec(select(Category).where(Category.user_id == user.id)).all()
    assert len(categories) == len(DEFAULT_CATEGORIES)
