"""Defaults and environment overrides applied to a decoded document."""

from __future__ import annotations

from collections.abc import Mapping
import os
from typing import Any

from semaphore.config.document import ConfigType
from semaphore.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PORT = ":3000"
DEFAULT_TMP_PATH = "/tmp/semaphore"
DEFAULT_MAX_PARALLEL_TASKS = 10
PORT_ENV_VAR = "PORT"


def resolve_port(configured: str, env: Mapping[str, Any] | None = None) -> str:
    """Return the listen port in ``:port`` form.

    A non-empty ``PORT`` environment variable wins over the configured value,
    an empty value falls back to :data:`DEFAULT_PORT`.
    """

    runtime_env: Mapping[str, Any] = os.environ if env is None else env
    port = configured
    override = runtime_env.get(PORT_ENV_VAR)
    if override:
        port = f":{override}"
        logger.info(
            "Listen port overridden from environment",
            extra={"event": "config.port.env_override", "port": port},
        )
    if not port:
        port = DEFAULT_PORT
    if not port.startswith(":"):
        port = f":{port}"
    return port


def validate_config(conf: ConfigType, env: Mapping[str, Any] | None = None) -> ConfigType:
    """Apply defaults in place and return ``conf``.

    Only the listen port, ephemeral storage path and task concurrency are
    normalised; email, LDAP and telegram settings are taken as-is.
    """

    conf.port = resolve_port(conf.port, env)

    if not conf.tmp_path:
        conf.tmp_path = DEFAULT_TMP_PATH

    if conf.max_parallel_tasks < 1:
        conf.max_parallel_tasks = DEFAULT_MAX_PARALLEL_TASKS

    return conf


__all__ = [
    "DEFAULT_MAX_PARALLEL_TASKS",
    "DEFAULT_PORT",
    "DEFAULT_TMP_PATH",
    "PORT_ENV_VAR",
    "resolve_port",
    "validate_config",
]
