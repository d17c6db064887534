"""Pytest configuration and shared fixtures for HomeLedger tests.

Service tests work on a temporary SQLite file through ``db_session``; API tests
run a Flask app in ``shared`` auth mode pointed at the same file, so rows built
with the factories are visible to requests.
"""

from __future__ import annotations

import tempfile
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import Session, create_engine

from homeledger import create_app
from homeledger.extensions import init_database
from homeledger.models import Asset, Category, CreditCard, User

AUTH_HEADERS = {"Authorization": "Bearer test-token"}


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test."""

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    init_database(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session for a single test; each factory commits what it creates."""

    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def balance_of(db_engine):
    """Read an asset balance through a fresh session."""

    def _balance(asset_id) -> Decimal:
        with Session(db_engine) as session:
            return session.get(Asset, asset_id).balance

    return _balance


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(db_session) -> User:
    """Default owner for test data."""

    u = User(firebase_uid="tester-uid", email="tester@example.com", display_name="Tester")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def user_factory(db_session):
    def _create_user(firebase_uid: str, email: str = "") -> User:
        u = User(firebase_uid=firebase_uid, email=email or f"{firebase_uid}@example.com")
        db_session.add(u)
        db_session.commit()
        db_session.refresh(u)
        return u

    return _create_user


@pytest.fixture
def category_factory(db_session, user):
    """Factory for creating test categories."""

    def _create_category(
        name: str = "Food", kind: str = "EXPENSE", owner: User | None = None
    ) -> Category:
        owner = owner or user
        category = Category(user_id=owner.id, name=name, kind=kind)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _create_category


@pytest.fixture
def asset_factory(db_session, user):
    """Factory for assets whose balance starts at ``balance``."""

    def _create_asset(
        name: str = "Checking",
        balance: Decimal | int | str = 0,
        type: str = "BANK",
        owner: User | None = None,
    ) -> Asset:
        owner = owner or user
        amount = Decimal(str(balance))
        asset = Asset(
            user_id=owner.id, name=name, type=type, balance=amount, initial_balance=amount
        )
        db_session.add(asset)
        db_session.commit()
        db_session.refresh(asset)
        return asset

    return _create_asset


@pytest.fixture
def card_factory(db_session, user):
    """Factory for credit or debit cards linked to an asset."""

    def _create_card(
        linked_asset: Asset,
        card_type: str = "CREDIT",
        name: str = "Card",
        owner: User | None = None,
    ) -> CreditCard:
        owner = owner or user
        card = CreditCard(
            user_id=owner.id, name=name, card_type=card_type, linked_asset_id=linked_asset.id
        )
        db_session.add(card)
        db_session.commit()
        db_session.refresh(card)
        return card

    return _create_card


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch, db_engine, user):
    """Flask app in shared auth mode; every request acts as ``user``."""

    monkeypatch.setenv("HOMELEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HOMELEDGER_DATABASE_URL", db_engine.url.render_as_string(hide_password=False))
    monkeypatch.setenv("HOMELEDGER_AUTH_MODE", "shared")
    monkeypatch.setenv("SHARED_USER_ID", str(user.id))
    monkeypatch.delenv("HOMELEDGER_ENV", raising=False)
    return create_app("testing")


@pytest.fixture()
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def api(client):
    """Test client wrapper that sends the bearer header on every call."""

    class _Api:
        def __getattr__(self, method):
            call = getattr(client, method)

            def _request(*args, **kwargs):
                headers = {**AUTH_HEADERS, **kwargs.pop("headers", {})}
                return call(*args, headers=headers, **kwargs)

            return _request

    return _Api()
