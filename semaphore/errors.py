"""Typed configuration errors for Semaphore."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes surfaced by the configuration layer."""

    DB_CONFIG_NOT_FOUND = "DB_CONFIG_NOT_FOUND"
    DB_CONFIG_CONFLICT = "DB_CONFIG_CONFLICT"
    UNSUPPORTED_DB_DRIVER = "UNSUPPORTED_DB_DRIVER"
    CONFIG_DECODE_ERROR = "CONFIG_DECODE_ERROR"
    MALFORMED_SECRET = "MALFORMED_SECRET"
    COOKIE_ERROR = "COOKIE_ERROR"


class ConfigError(Exception):
    """Base exception for recoverable configuration errors."""

    __slots__ = ("message", "code", "meta")

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        meta: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.meta = dict(meta) if meta is not None else None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.meta:
            payload["meta"] = dict(self.meta)
        return payload


class DatabaseConfigNotFoundError(ConfigError):
    """Raised when none of the candidate database backends is configured."""

    def __init__(self, message: str = "database configuration not found") -> None:
        super().__init__(message, code=ErrorCode.DB_CONFIG_NOT_FOUND)


class DatabaseConfigConflictError(ConfigError):
    """Raised when more than one database backend is configured at once."""

    def __init__(self, backends: tuple[str, ...]) -> None:
        rendered = ", ".join(backends)
        super().__init__(
            f"multiple database configurations found: {rendered}",
            code=ErrorCode.DB_CONFIG_CONFLICT,
            meta={"backends": rendered},
        )
        self.backends = backends


class UnsupportedDatabaseDriverError(ConfigError):
    def __init__(self, dialect: Any) -> None:
        rendered = str(getattr(dialect, "name", dialect))
        super().__init__(
            f"unsupported database driver: {rendered}",
            code=ErrorCode.UNSUPPORTED_DB_DRIVER,
            meta={"dialect": rendered},
        )


class ConfigDecodeError(ConfigError):
    """Raised when the configuration document cannot be decoded."""

    def __init__(self, message: str, *, meta: Mapping[str, Any] | None = None) -> None:
        super().__init__(message, code=ErrorCode.CONFIG_DECODE_ERROR, meta=meta)


class MalformedSecretError(ConfigError):
    def __init__(self, field: str) -> None:
        super().__init__(
            f"{field} is not valid base64",
            code=ErrorCode.MALFORMED_SECRET,
            meta={"field": field},
        )


class CookieError(ConfigError):
    """Raised by the secure cookie authenticator."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code=ErrorCode.COOKIE_ERROR)


__all__ = [
    "ConfigDecodeError",
    "ConfigError",
    "CookieError",
    "DatabaseConfigConflictError",
    "DatabaseConfigNotFoundError",
    "ErrorCode",
    "MalformedSecretError",
    "UnsupportedDatabaseDriverError",
]
