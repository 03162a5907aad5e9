"""Runtime configuration for the Semaphore server.

Startup goes through :func:`init_config`, which loads ``config.json``, applies
defaults and environment overrides and derives the cookie authenticator.  The
resulting :class:`RuntimeConfig` is passed explicitly to consumers.
"""

from __future__ import annotations

from .database import DbConfig, DbDriver, dialect_name, select_db_config
from .document import COOKIE_SECRET_BYTES, ConfigType, LdapMappings
from .loader import (
    CONFIG_NOT_FOUND_HINT,
    DEFAULT_CONFIG_FILENAME,
    EX_CONFIG,
    EXIT_CONFIG_NOT_FOUND,
    decode_config,
    load_config,
    resolve_config_path,
)
from .provisioning import (
    DEFAULT_SECRET_POLICY,
    SecretDecodePolicy,
    decode_secret,
    parse_web_host,
    provision_secrets,
)
from .runtime import RuntimeConfig, init_config
from .validation import (
    DEFAULT_MAX_PARALLEL_TASKS,
    DEFAULT_PORT,
    DEFAULT_TMP_PATH,
    PORT_ENV_VAR,
    resolve_port,
    validate_config,
)

__all__ = [
    "CONFIG_NOT_FOUND_HINT",
    "COOKIE_SECRET_BYTES",
    "ConfigType",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_MAX_PARALLEL_TASKS",
    "DEFAULT_PORT",
    "DEFAULT_SECRET_POLICY",
    "DEFAULT_TMP_PATH",
    "DbConfig",
    "DbDriver",
    "EX_CONFIG",
    "EXIT_CONFIG_NOT_FOUND",
    "LdapMappings",
    "PORT_ENV_VAR",
    "RuntimeConfig",
    "SecretDecodePolicy",
    "decode_config",
    "decode_secret",
    "dialect_name",
    "init_config",
    "load_config",
    "parse_web_host",
    "provision_secrets",
    "resolve_config_path",
    "resolve_port",
    "select_db_config",
    "validate_config",
]
