"""Startup sequence producing the configuration context for the server."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any
from urllib.parse import ParseResult

from semaphore.config.database import DbConfig, select_db_config
from semaphore.config.document import ConfigType
from semaphore.config.loader import load_config, resolve_config_path
from semaphore.config.provisioning import (
    DEFAULT_SECRET_POLICY,
    SecretDecodePolicy,
    provision_secrets,
)
from semaphore.config.validation import validate_config
from semaphore.logging import get_logger
from semaphore.logging_events import log_event
from semaphore.security.cookie import SecureCookie

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class RuntimeConfig:
    """Validated document plus the state derived from it.

    Built once at startup and handed to every component that needs it; the
    document is not modified afterwards.
    """

    document: ConfigType
    cookie: SecureCookie
    web_host_url: ParseResult | None
    config_path: Path

    def db_config(self, *, allow_multiple: bool = False) -> DbConfig:
        return select_db_config(self.document, allow_multiple=allow_multiple)


def init_config(
    config_path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, Any] | None = None,
    secret_policy: SecretDecodePolicy = DEFAULT_SECRET_POLICY,
) -> RuntimeConfig:
    """Load, validate and provision secrets in that order."""

    document = load_config(config_path)
    validate_config(document, env)
    cookie, web_host_url = provision_secrets(document, policy=secret_policy)
    runtime = RuntimeConfig(
        document=document,
        cookie=cookie,
        web_host_url=web_host_url,
        config_path=resolve_config_path(config_path),
    )
    log_event(
        logger,
        "config.ready",
        path=str(runtime.config_path),
        listen=document.listen_address(),
        cookie_encryption=cookie.can_encrypt,
        web_host=web_host_url.geturl() if web_host_url is not None else None,
    )
    return runtime


__all__ = ["RuntimeConfig", "init_config"]
