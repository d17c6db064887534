"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

AUTH_MODES = frozenset({"firebase", "shared"})


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_str(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HomeLedger"
    DB_FILENAME = "homeledger.db"
    HISTORY_PAGE_SIZE = 10
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("HOMELEDGER_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HOMELEDGER_DEV_MODE", default=True)
        self.ENVIRONMENT = (_env_str("HOMELEDGER_ENV") or "development").lower()
        self.DATABASE_URL = (
            _env_str("HOMELEDGER_DATABASE_URL")
            or _env_str("DATABASE_URL")
            or self._build_sqlite_url()
        )
        self.AUTH_MODE = (_env_str("HOMELEDGER_AUTH_MODE") or "firebase").lower()
        self.SHARED_USER_ID = _env_str("SHARED_USER_ID")
        self.FIREBASE_PROJECT_ID = _env_str("FIREBASE_PROJECT_ID")
        self.FIREBASE_CLIENT_EMAIL = _env_str("FIREBASE_CLIENT_EMAIL")
        self.FIREBASE_PRIVATE_KEY = _env_str("FIREBASE_PRIVATE_KEY")
        self.CORS_ORIGIN = _env_str("HOMELEDGER_CORS_ORIGIN") or "*"

        if self.AUTH_MODE not in AUTH_MODES:
            raise ValueError(
                f"HOMELEDGER_AUTH_MODE must be one of {sorted(AUTH_MODES)}, got {self.AUTH_MODE!r}."
            )
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HOMELEDGER_SECRET_KEY must be set in non-dev mode.")

    @property
    def is_production(self) -> bool:
        """Production hides exception details from API error bodies."""

        return self.ENVIRONMENT == "production"

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HOMELEDGER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}

    def firebase_credentials(self) -> dict[str, str] | None:
        """Return service-account fields for firebase-admin, or None when incomplete."""

        if not (self.FIREBASE_PROJECT_ID and self.FIREBASE_CLIENT_EMAIL and self.FIREBASE_PRIVATE_KEY):
            return None
        return {
            "type": "service_account",
            "project_id": self.FIREBASE_PROJECT_ID,
            "client_email": self.FIREBASE_CLIENT_EMAIL,
            # Keys stored in env files usually carry escaped newlines.
            "private_key": self.FIREBASE_PRIVATE_KEY.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        }


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class ProductionConfig(BaseConfig):
    """Production configuration; expects Postgres via HOMELEDGER_DATABASE_URL."""

    DEBUG = False

    def __init__(self) -> None:
        super().__init__()
        self.ENVIRONMENT = "production"


class TestConfig(BaseConfig):
    """Configuration for the pytest suite."""

    __test__ = False
    TESTING = True
