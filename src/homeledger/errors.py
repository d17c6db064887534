"""Exception types rendered as JSON API errors."""

from __future__ import annotations

import uuid


class HttpError(Exception):
    """An error that maps directly onto an HTTP status and a stable error code."""

    status: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: str | None = None, status: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status


class ValidationError(HttpError):
    status = 400
    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        fields: dict[str, list[str]] | None = None,
    ):
        super().__init__(message, code=code)
        self.fields = fields or {}


class AuthenticationError(HttpError):
    status = 401
    code = "UNAUTHORIZED"


class NotFoundError(HttpError):
    status = 404
    code = "NOT_FOUND"


class DanglingAssetReference(NotFoundError):
    """A transaction points at an asset row that does not exist for its owner."""

    code = "DANGLING_ASSET_REFERENCE"

    def __init__(self, asset_id: uuid.UUID | str):
        super().__init__(f"Asset {asset_id} referenced by the transaction does not exist")
        self.asset_id = asset_id


class ConflictError(HttpError):
    status = 409
    code = "CONFLICT"


class ConfigurationError(HttpError):
    status = 500
    code = "CONFIGURATION_ERROR"


__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "ConflictError",
    "DanglingAssetReference",
    "HttpError",
    "NotFoundError",
    "ValidationError",
]
