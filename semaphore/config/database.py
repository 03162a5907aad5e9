"""Database backend descriptors and active backend selection."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator
from sqlalchemy.engine import URL

from semaphore.errors import (
    DatabaseConfigConflictError,
    DatabaseConfigNotFoundError,
    UnsupportedDatabaseDriverError,
)
from semaphore.logging import get_logger

if TYPE_CHECKING:
    from semaphore.config.document import ConfigType

logger = get_logger(__name__)

_MYSQL_QUERY = "parseTime=true&interpolateParams=true"
_SQLALCHEMY_DRIVERS = {
    "mysql": "mysql+pymysql",
    "postgres": "postgresql+psycopg2",
}


class DbDriver(int, Enum):
    """Database technology a backend descriptor targets."""

    MYSQL = 0
    BOLT = 1
    POSTGRES = 2

    @property
    def display_name(self) -> str:
        """Dialect name used by the SQL layer; BoltDB has none."""

        return dialect_name(self)

    def __str__(self) -> str:
        return self.display_name


def dialect_name(driver: Any) -> str:
    if driver is DbDriver.MYSQL:
        return "mysql"
    if driver is DbDriver.BOLT:
        return ""
    if driver is DbDriver.POSTGRES:
        return "postgres"
    raise TypeError(f"unknown database driver: {driver!r}")


def omit_null_fields(data: Any) -> Any:
    """Drop keys whose JSON value is ``null`` so they keep their zero value."""

    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


def _split_host_port(hostname: str) -> tuple[str, int | None]:
    host, sep, port = hostname.rpartition(":")
    if sep and port.isdigit():
        if host.startswith("[") and host.endswith("]"):
            return host[1:-1], int(port)
        if host and ":" not in host:
            return host, int(port)
    return hostname, None


class DbConfig(BaseModel):
    """One candidate database backend as stored in ``config.json``."""

    model_config = ConfigDict(extra="ignore")

    hostname: str = Field(default="", alias="host")
    username: str = Field(default="", alias="user")
    password: str = Field(default="", alias="pass")
    db_name: str = Field(default="", alias="name")

    _dialect: DbDriver | None = PrivateAttr(default=None)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        return omit_null_fields(data)

    @property
    def dialect(self) -> DbDriver | None:
        return self._dialect

    def with_dialect(self, dialect: DbDriver) -> DbConfig:
        """Return a copy of the descriptor tagged with ``dialect``."""

        tagged = self.model_copy()
        tagged._dialect = dialect
        return tagged

    def is_present(self) -> bool:
        return self.hostname != ""

    def supports_multiple_databases(self) -> bool:
        return True

    def get_connection_string(self, include_db_name: bool) -> str:
        """Render the driver connection string for the tagged dialect.

        Bolt stores are addressed by filesystem path, so the host is returned
        verbatim.  MySQL and Postgres omit the database name segment unless
        ``include_db_name`` is set, which lets setup tooling connect to the
        server before the database exists.
        """

        dialect = self._dialect
        if dialect is DbDriver.BOLT:
            return self.hostname
        db_name = self.db_name if include_db_name else ""
        if dialect is DbDriver.MYSQL:
            return (
                f"{self.username}:{self.password}@tcp({self.hostname})/{db_name}"
                f"?{_MYSQL_QUERY}"
            )
        if dialect is DbDriver.POSTGRES:
            return f"postgres://{self.username}:{self.password}@{self.hostname}/{db_name}"
        raise UnsupportedDatabaseDriverError(dialect)

    def sqlalchemy_url(self, include_db_name: bool = True) -> URL:
        """Build a SQLAlchemy URL for the SQL backends."""

        dialect = self._dialect
        if dialect is not DbDriver.MYSQL and dialect is not DbDriver.POSTGRES:
            raise UnsupportedDatabaseDriverError(dialect)
        host, port = _split_host_port(self.hostname)
        return URL.create(
            _SQLALCHEMY_DRIVERS[dialect.display_name],
            username=self.username or None,
            password=self.password or None,
            host=host or None,
            port=port,
            database=(self.db_name or None) if include_db_name else None,
        )


def _candidates(conf: ConfigType) -> tuple[tuple[str, DbDriver, DbConfig], ...]:
    # Selection priority order.
    return (
        ("mysql", DbDriver.MYSQL, conf.mysql),
        ("bolt", DbDriver.BOLT, conf.bolt_db),
        ("pgsql", DbDriver.POSTGRES, conf.postgres),
    )


def select_db_config(conf: ConfigType, *, allow_multiple: bool = False) -> DbConfig:
    """Return the single configured backend, tagged with its dialect.

    Raises :class:`DatabaseConfigNotFoundError` when no backend has a host and
    :class:`DatabaseConfigConflictError` when several do.  ``allow_multiple``
    keeps the legacy behaviour of picking the first present backend in the
    order MySQL, Bolt, Postgres.
    """

    present = [
        (key, driver, candidate)
        for key, driver, candidate in _candidates(conf)
        if candidate.is_present()
    ]
    if not present:
        raise DatabaseConfigNotFoundError()

    if len(present) > 1:
        keys = tuple(key for key, _driver, _candidate in present)
        if not allow_multiple:
            raise DatabaseConfigConflictError(keys)
        logger.warning(
            "Multiple database configurations found (%s); using %s",
            ", ".join(keys),
            keys[0],
            extra={"event": "config.db.ambiguous", "selected": keys[0]},
        )

    _key, driver, candidate = present[0]
    return candidate.with_dialect(driver)


__all__ = ["DbConfig", "DbDriver", "dialect_name", "omit_null_fields", "select_db_config"]
