"""Locate and decode ``config.json``."""

from __future__ import annotations

import os
from pathlib import Path
import sys
from typing import NoReturn

from pydantic import ValidationError

from semaphore.config.document import ConfigType
from semaphore.errors import ConfigDecodeError
from semaphore.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILENAME = "config.json"

# Exit codes aligned with ``sysexits`` where one applies.
EXIT_CONFIG_NOT_FOUND = 1
EX_CONFIG = getattr(os, "EX_CONFIG", 78)

CONFIG_NOT_FOUND_HINT = (
    "Cannot Find configuration! Use --config parameter to point to a JSON file "
    "generated by setup.\n\n Hint: have you run setup?"
)


def resolve_config_path(
    explicit_path: str | os.PathLike[str] | None = None,
    *,
    cwd: Path | None = None,
) -> Path:
    """Return the explicit path when given, else ``<cwd>/config.json``."""

    if explicit_path is not None and str(explicit_path):
        return Path(explicit_path)
    base = cwd if cwd is not None else Path.cwd()
    return base / DEFAULT_CONFIG_FILENAME


def decode_config(raw: str | bytes) -> ConfigType:
    try:
        return ConfigType.model_validate_json(raw, strict=True)
    except ValidationError as exc:
        raise ConfigDecodeError(
            "Could not decode configuration!",
            meta={"errors": exc.error_count(), "detail": str(exc)},
        ) from exc


def _exit_on_config_error(path: Path | None, exc: OSError) -> NoReturn:
    print(CONFIG_NOT_FOUND_HINT, file=sys.stderr)
    logger.error(
        "Unable to open configuration file",
        extra={
            "event": "config.load.failed",
            "path": str(path) if path is not None else None,
            "error": str(exc),
        },
    )
    raise SystemExit(EXIT_CONFIG_NOT_FOUND)


def load_config(config_path: str | os.PathLike[str] | None = None) -> ConfigType:
    """Read and decode the configuration file.

    Both failure modes terminate the process: a missing or unreadable file
    exits with status 1 after printing the setup hint, a document that does
    not decode exits with ``EX_CONFIG``.
    """

    path: Path | None = None
    try:
        path = resolve_config_path(config_path)
        raw = path.read_bytes()
    except OSError as exc:
        _exit_on_config_error(path, exc)

    try:
        conf = decode_config(raw)
    except ConfigDecodeError as exc:
        print(exc.message, file=sys.stderr)
        print(exc.__cause__, file=sys.stderr)
        logger.error(
            "Configuration file could not be decoded",
            extra={
                "event": "config.decode.failed",
                "path": str(path),
                "errors": exc.meta.get("errors") if exc.meta else None,
            },
        )
        raise SystemExit(EX_CONFIG) from exc

    logger.info(
        "Using config file: %s",
        path,
        extra={"event": "config.file.resolved", "path": str(path)},
    )
    return conf


__all__ = [
    "CONFIG_NOT_FOUND_HINT",
    "DEFAULT_CONFIG_FILENAME",
    "EXIT_CONFIG_NOT_FOUND",
    "EX_CONFIG",
    "decode_config",
    "load_config",
    "resolve_config_path",
]
