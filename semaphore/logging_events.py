"""Structured log events carrying flat, JSON-compatible fields."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

_JSON_SCALARS = (str, int, float, bool, type(None))


def _check_json(value: Any, *, path: str, nested: bool) -> None:
    if isinstance(value, _JSON_SCALARS):
        return
    if not nested:
        raise TypeError(f"Field '{path}' must be a flat JSON-compatible value")
    if isinstance(value, Mapping):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Keys in '{path}' must be strings")
            _check_json(item, path=f"{path}.{key}", nested=True)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _check_json(item, path=f"{path}[{index}]", nested=True)
    else:
        raise TypeError(f"Unsupported value in '{path}': {type(value).__name__}")


def log_event(logger: Any, event: str, /, *, level: int = logging.INFO, **fields: Any) -> None:
    """Log ``event`` with its fields attached as ``extra``.

    Top-level fields must be scalars; structured data goes under ``meta``.
    """

    if not isinstance(event, str) or not event.strip():
        raise ValueError("event must be a non-empty string")

    extra: dict[str, Any] = {"event": event}
    meta = fields.pop("meta", None)
    for name, value in fields.items():
        _check_json(value, path=name, nested=False)
        extra[name] = value
    if meta is not None:
        if not isinstance(meta, Mapping):
            raise TypeError("meta must be a mapping if provided")
        _check_json(meta, path="meta", nested=True)
        extra["meta"] = dict(meta)

    logger.log(level, event, extra=extra)
