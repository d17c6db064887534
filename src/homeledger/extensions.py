"""Database and extension wiring for HomeLedger."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from flask import Flask, current_app, has_app_context
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from .config import BaseConfig

_engine: Engine | None = None


def create_db_engine(config: BaseConfig) -> Engine:
    """Create the SQLModel engine from configuration."""

    return create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())


def init_database(engine: Engine) -> None:
    """Create any missing tables."""

    from . import models  # noqa: F401  # ensure models registered with SQLModel metadata

    SQLModel.metadata.create_all(engine)


def init_db(app: Flask) -> None:
    """Initialize the engine using configuration from the app."""

    config: BaseConfig = app.config["HOMELEDGER_CONFIG"]
    engine = create_db_engine(config)

    global _engine
    _engine = engine
    app.extensions["homeledger.engine"] = engine

    init_database(engine)
    # TODO(@migrations): replace create_all with Alembic revisions before the next schema change.


def get_engine() -> Engine:
    """Return the engine of the current app, or the last one initialized."""

    if has_app_context() and "homeledger.engine" in current_app.extensions:
        return current_app.extensions["homeledger.engine"]
    if _engine is None:
        raise RuntimeError("Database engine not initialized")
    return _engine


@contextmanager
def session_scope(engine: Engine | None = None) -> Iterator[Session]:
    """Provide a transactional scope around operations.

    Everything done inside the block commits together or rolls back together.
    """

    session = Session(engine or get_engine(), expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
