"""Logging setup for the Semaphore server and its tooling."""

from __future__ import annotations

from collections.abc import Mapping
import logging
import os
import sys
from typing import Any, TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV_VAR = "SEMAPHORE_LOG_LEVEL"


def resolve_log_level(level: str | None = None, env: Mapping[str, Any] | None = None) -> int:
    runtime_env: Mapping[str, Any] = os.environ if env is None else env
    name = level or runtime_env.get(LOG_LEVEL_ENV_VAR) or "INFO"
    return getattr(logging, str(name).upper(), logging.INFO)


def configure_logging(
    level: str | None = None,
    *,
    stream: TextIO | None = None,
    log_file: str | None = None,
) -> None:
    """Install the root handlers; log output goes to stderr unless told otherwise."""
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
