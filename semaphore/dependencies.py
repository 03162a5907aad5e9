"""FastAPI dependency providers for the runtime configuration."""

from __future__ import annotations

from fastapi import Depends, FastAPI, Request

from semaphore.config import ConfigType, DbConfig, RuntimeConfig
from semaphore.security.cookie import SecureCookie

_STATE_ATTRIBUTE = "runtime_config"


def install_runtime_config(app: FastAPI, runtime: RuntimeConfig) -> None:
    setattr(app.state, _STATE_ATTRIBUTE, runtime)


def get_runtime_config(request: Request) -> RuntimeConfig:
    runtime = getattr(request.app.state, _STATE_ATTRIBUTE, None)
    if not isinstance(runtime, RuntimeConfig):
        raise RuntimeError("Runtime configuration has not been initialised")
    return runtime


def get_config_document(runtime: RuntimeConfig = Depends(get_runtime_config)) -> ConfigType:
    return runtime.document


def get_db_config(runtime: RuntimeConfig = Depends(get_runtime_config)) -> DbConfig:
    """Selected database backend; selection errors propagate to the caller."""

    return runtime.db_config()


def get_secure_cookie(runtime: RuntimeConfig = Depends(get_runtime_config)) -> SecureCookie:
    return runtime.cookie


__all__ = [
    "get_config_document",
    "get_db_config",
    "get_runtime_config",
    "get_secure_cookie",
    "install_runtime_config",
]
